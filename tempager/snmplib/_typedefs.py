#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import abc
import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Self

from tempager.ccc.exceptions import MKSNMPError
from tempager.utils.hostaddress import IPAddress

OID = str
SNMPCommunity = str


class SNMPConnectionError(MKSNMPError):
    """The SNMP session to the device could not be opened"""


class SNMPReadError(MKSNMPError):
    """The session was opened, but the request did not yield a usable response"""


class SNMPVersion(enum.Enum):
    V1 = 0


class SNMPValueType(enum.Enum):
    """The SMI syntax a value was transmitted with (RFC 1155)"""

    INTEGER = "INTEGER"
    OCTET_STRING = "OCTET STRING"
    OBJECT_IDENTIFIER = "OBJECT IDENTIFIER"
    NULL = "NULL"
    IP_ADDRESS = "IpAddress"
    COUNTER = "Counter"
    GAUGE = "Gauge"
    TIME_TICKS = "TimeTicks"
    OPAQUE = "Opaque"


@dataclass(frozen=True)
class SNMPValue:
    """A single variable binding as returned by the device

    The Python type of *value* follows *type*: int for the numeric syntaxes,
    bytes for OCTET STRING and Opaque, str for OBJECT IDENTIFIER and
    IpAddress and None for NULL.
    """

    oid: OID
    type: SNMPValueType
    value: int | bytes | str | None


# Wraps the configuration of a device into a single object for the SNMP code
@dataclass(frozen=True, kw_only=True)
class SNMPHostConfig:
    ipaddress: IPAddress
    credentials: SNMPCommunity
    port: int = 161
    snmp_version: SNMPVersion = SNMPVersion.V1
    timeout: float = 2.0


class SNMPBackend(abc.ABC):
    """One SNMP session to a single device

    Use it as a context manager: the session is opened on entering and
    closed on leaving the block, no matter how the block is left.
    """

    def __init__(self, snmp_config: SNMPHostConfig, logger: logging.Logger) -> None:
        super().__init__()
        self._logger = logger
        self.config = snmp_config

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def address(self) -> IPAddress:
        return self.config.ipaddress

    @property
    def port(self) -> int:
        return self.config.port

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @abc.abstractmethod
    def connect(self) -> None:
        """Open the session

        Raises:
            SNMPConnectionError: if the session cannot be opened
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def close(self) -> None:
        raise NotImplementedError()

    @abc.abstractmethod
    def get(self, /, oids: Sequence[OID]) -> Sequence[SNMPValue]:
        """Fetch all given OIDs with a single GET request

        The values are returned in the order of *oids*.

        Raises:
            SNMPReadError: if there is no usable response
        """
        raise NotImplementedError()
