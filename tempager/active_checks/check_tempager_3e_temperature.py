#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_tempager_3e_temperature - Monitor the temperature sensors of an AVTECH TemPageR 3E

The device is asked via SNMPv1 for its location and the readings of its
internal and external sensor. Only the external sensor is compared against
the levels, the internal one is reported as performance data.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from tempager.ccc.exceptions import MKGeneralException
from tempager.snmplib import (
    OID,
    SNMPBackend,
    SNMPConnectionError,
    SNMPHostConfig,
    SNMPReadError,
    SNMPValue,
    SNMPValueType,
    UDPSNMPBackend,
)
from tempager.utils.active_check import active_check_main, CheckResult
from tempager.utils.hostaddress import IPAddress
from tempager.utils.log import VERBOSE
from tempager.utils.statename import State

CHECK_NAME = "check-tempager-3e-temperature"

OID_LOCATION = ".1.3.6.1.2.1.1.6.0"
OID_INTERNAL_TEMPERATURE = ".1.3.6.1.4.1.20916.1.7.1.1.1.1.0"
OID_EXTERNAL_TEMPERATURE = ".1.3.6.1.4.1.20916.1.7.1.2.1.1.0"

_OIDS: Sequence[OID] = (OID_LOCATION, OID_INTERNAL_TEMPERATURE, OID_EXTERNAL_TEMPERATURE)

logger = logging.getLogger("tempager.active_checks.tempager_3e")


class MissingTarget(MKGeneralException):
    pass


class InvalidTarget(MKGeneralException):
    pass


class ReadingTypeError(MKGeneralException):
    """A value returned by the device was not transmitted with the expected syntax"""

    field = ""

    def __init__(self, value: SNMPValue) -> None:
        super().__init__(f"failed to read {self.field}.")
        self.value = value


class LocationTypeError(ReadingTypeError):
    field = "location"


class InternalTempTypeError(ReadingTypeError):
    field = "internal temperature"


class ExternalTempTypeError(ReadingTypeError):
    field = "external temperature"


class CheckConfiguration(BaseModel, frozen=True, allow_inf_nan=False):
    target: str
    community: str = "public"
    warning: float = 35.0
    critical: float = 40.0
    port: int = Field(default=161, ge=1, le=65535)
    timeout: float = Field(default=2.0, gt=0)
    verbose: int = 0
    debug: bool = False


@dataclass(frozen=True)
class DeviceReading:
    location: str
    internal_raw: int
    external_raw: int

    @property
    def internal_temperature(self) -> float:
        """
        >>> DeviceReading("Lab", 3567, 0).internal_temperature
        35.67
        """
        return self.internal_raw / 100.0

    @property
    def external_temperature(self) -> float:
        return self.external_raw / 100.0


class SNMPBackendFactory(Protocol):
    def __call__(self, snmp_config: SNMPHostConfig, logger: logging.Logger) -> SNMPBackend: ...


def parse_arguments(argv: Sequence[str]) -> CheckConfiguration:
    parser = argparse.ArgumentParser(
        prog="check_tempager_3e_temperature",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-t",
        "--target",
        default="",
        metavar="ADDRESS",
        help="IP address of the target unit.",
    )
    parser.add_argument(
        "-C",
        "--community",
        default="public",
        help="SNMP community (default: public)",
    )
    parser.add_argument(
        "-w",
        "--warning",
        type=float,
        default=35.0,
        metavar="CELSIUS",
        help="Warning threshold for the external sensor (default: 35.0)",
    )
    parser.add_argument(
        "-c",
        "--critical",
        type=float,
        default=40.0,
        metavar="CELSIUS",
        help="Critical threshold for the external sensor (default: 40.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=161,
        help="SNMP port of the target unit (default: 161)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=2.0,
        metavar="SEC",
        help="Seconds to wait for the SNMP response (default: 2.0)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode (on stderr), give twice for debug output",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode: let Python exceptions come through",
    )
    args = parser.parse_args(argv)
    try:
        return CheckConfiguration.model_validate(vars(args))
    except ValidationError as e:
        parser.error(
            "; ".join(f"argument --{error['loc'][0]}: {error['msg']}" for error in e.errors())
        )


def check_arguments(config: CheckConfiguration) -> IPAddress:
    """Validate the target before anything is sent over the network

    >>> check_arguments(CheckConfiguration(target="10.0.0.5"))
    '10.0.0.5'
    """
    if not config.target:
        raise MissingTarget("target unit must be specified.")
    try:
        return IPAddress(config.target)
    except ValueError as e:
        raise InvalidTarget("target must be an IP address.") from e


def read_device(
    config: CheckConfiguration,
    target: IPAddress,
    backend_factory: SNMPBackendFactory,
) -> Sequence[SNMPValue]:
    snmp_config = SNMPHostConfig(
        ipaddress=target,
        credentials=config.community,
        port=config.port,
        timeout=config.timeout,
    )
    with backend_factory(snmp_config, logger) as backend:
        return backend.get(_OIDS)


def _decode_string(value: bytes) -> str:
    try:
        return value.decode()
    except UnicodeDecodeError:
        return value.decode("latin1")


def decode_reading(values: Sequence[SNMPValue]) -> DeviceReading | ReadingTypeError:
    """Check the syntax of the three values and turn them into a reading

    The first value with an unexpected syntax is returned as error, in the
    order location, internal, external.
    """
    location, internal, external = values
    if location.type is not SNMPValueType.OCTET_STRING or not isinstance(location.value, bytes):
        return LocationTypeError(location)
    if internal.type is not SNMPValueType.INTEGER or not isinstance(internal.value, int):
        return InternalTempTypeError(internal)
    if external.type is not SNMPValueType.INTEGER or not isinstance(external.value, int):
        return ExternalTempTypeError(external)
    return DeviceReading(
        location=_decode_string(location.value),
        internal_raw=internal.value,
        external_raw=external.value,
    )


def temperature_state(temperature: float, *, warning: float, critical: float) -> State:
    """The levels are exceeded only if the temperature is strictly above them

    >>> temperature_state(40.0, warning=35.0, critical=40.0)
    <State.WARN: 1>
    >>> temperature_state(40.01, warning=35.0, critical=40.0)
    <State.CRIT: 2>
    >>> temperature_state(35.0, warning=35.0, critical=40.0)
    <State.OK: 0>
    """
    if temperature > critical:
        return State.CRIT
    if temperature > warning:
        return State.WARN
    return State.OK


def format_perfdata(reading: DeviceReading) -> str:
    return "tempager_internal=%.2f, tempager_external=%.2f" % (
        reading.internal_temperature,
        reading.external_temperature,
    )


def format_summary(reading: DeviceReading) -> str:
    """
    >>> format_summary(DeviceReading("Server Room", 2850, 3620))
    'Server Room temperature is 36.20c | tempager_internal=28.50, tempager_external=36.20'
    """
    return "%s temperature is %.2fc | %s" % (
        reading.location,
        reading.external_temperature,
        format_perfdata(reading),
    )


def check_tempager(
    config: CheckConfiguration,
    backend_factory: SNMPBackendFactory,
) -> CheckResult:
    target = check_arguments(config)

    try:
        values = read_device(config, target, backend_factory)
    except SNMPConnectionError as e:
        logger.log(VERBOSE, "Connecting to %s failed: %s", target, e)
        return State.CRIT, "failed to connect to tempager."
    except SNMPReadError as e:
        logger.log(VERBOSE, "Reading from %s failed: %s", target, e)
        return State.CRIT, "failed to gather oids."

    reading = decode_reading(values)
    if isinstance(reading, ReadingTypeError):
        logger.log(
            VERBOSE,
            "Unexpected syntax of OID %s: %s",
            reading.value.oid,
            reading.value.type.value,
        )
        return State.CRIT, str(reading)

    # Only the external sensor is checked against the levels
    return (
        temperature_state(
            reading.external_temperature,
            warning=config.warning,
            critical=config.critical,
        ),
        format_summary(reading),
    )


def main(
    argv: Sequence[str] | None = None,
    backend_factory: SNMPBackendFactory | None = None,
) -> int:
    factory = backend_factory or UDPSNMPBackend
    return active_check_main(
        CHECK_NAME,
        parse_arguments,
        lambda config: check_tempager(config, factory),
        sys.argv[1:] if argv is None else argv,
    )


if __name__ == "__main__":
    sys.exit(main())
