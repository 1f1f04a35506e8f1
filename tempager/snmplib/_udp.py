#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import asyncio
import ipaddress
import logging
from collections.abc import Iterable, Mapping, Sequence

import pyasn1.error
import pysnmp.error
import pysnmp.hlapi.v1arch.asyncio
import pysnmp.proto.rfc1902
from pyasn1.type.base import SimpleAsn1Type
from pyasn1.type.tag import TagSet

from tempager.utils.log import VERBOSE

from ._typedefs import (
    OID,
    SNMPBackend,
    SNMPConnectionError,
    SNMPHostConfig,
    SNMPReadError,
    SNMPValue,
    SNMPValueType,
    SNMPVersion,
)

VarBind = tuple[pysnmp.proto.rfc1902.ObjectName, SimpleAsn1Type]
TransportTarget = (
    pysnmp.hlapi.v1arch.asyncio.UdpTransportTarget
    | pysnmp.hlapi.v1arch.asyncio.Udp6TransportTarget
)

# SMIv1 and SMIv2 share the tags, so decoded RFC 1155 values are found here as well
_VALUE_TYPES: Mapping[TagSet, SNMPValueType] = {
    pysnmp.proto.rfc1902.Integer32.tagSet: SNMPValueType.INTEGER,
    pysnmp.proto.rfc1902.OctetString.tagSet: SNMPValueType.OCTET_STRING,
    pysnmp.proto.rfc1902.ObjectIdentifier.tagSet: SNMPValueType.OBJECT_IDENTIFIER,
    pysnmp.proto.rfc1902.Null.tagSet: SNMPValueType.NULL,
    pysnmp.proto.rfc1902.IpAddress.tagSet: SNMPValueType.IP_ADDRESS,
    pysnmp.proto.rfc1902.Counter32.tagSet: SNMPValueType.COUNTER,
    pysnmp.proto.rfc1902.Gauge32.tagSet: SNMPValueType.GAUGE,
    pysnmp.proto.rfc1902.TimeTicks.tagSet: SNMPValueType.TIME_TICKS,
    pysnmp.proto.rfc1902.Opaque.tagSet: SNMPValueType.OPAQUE,
}


def to_snmp_value(oid: OID, value: SimpleAsn1Type) -> SNMPValue:
    try:
        value_type = _VALUE_TYPES[value.tagSet]
    except KeyError:
        raise SNMPReadError(
            f"Unknown SNMP syntax {value.__class__.__name__} for {oid}"
        ) from None

    match value_type:
        case SNMPValueType.NULL:
            return SNMPValue(oid, value_type, None)
        case SNMPValueType.OCTET_STRING | SNMPValueType.OPAQUE:
            return SNMPValue(oid, value_type, value.asOctets())
        case SNMPValueType.OBJECT_IDENTIFIER:
            return SNMPValue(oid, value_type, "." + str(value))
        case SNMPValueType.IP_ADDRESS:
            return SNMPValue(oid, value_type, str(ipaddress.IPv4Address(value.asOctets())))
    return SNMPValue(oid, value_type, int(value))


async def _close_dispatcher(dispatcher: pysnmp.hlapi.v1arch.asyncio.SnmpDispatcher) -> None:
    dispatcher.close()
    # Let the transports see connection_lost before the loop goes away
    await asyncio.sleep(0)


class UDPSNMPBackend(SNMPBackend):
    """Talks SNMPv1 over UDP with pysnmp's v1arch command generator

    pysnmp only offers an asyncio API. A session owns its event loop from
    connect() until close(), and every request is one run of that loop.
    Exactly one datagram is sent per request, pysnmp's retries are disabled.
    """

    def __init__(self, snmp_config: SNMPHostConfig, logger: logging.Logger) -> None:
        super().__init__(snmp_config, logger)
        self._runner: asyncio.Runner | None = None
        self._dispatcher: pysnmp.hlapi.v1arch.asyncio.SnmpDispatcher | None = None
        self._target: TransportTarget | None = None

    def connect(self) -> None:
        self._logger.log(VERBOSE, "Opening SNMP session to %s:%d", self.address, self.port)
        if not 0 < self.port < 65536:
            raise SNMPConnectionError(f"Invalid port {self.port}")

        runner = asyncio.Runner()
        try:
            self._target, self._dispatcher = runner.run(self._open())
        except (pysnmp.error.PySnmpError, OSError, OverflowError) as e:
            runner.close()
            raise SNMPConnectionError(f"Cannot connect to {self.address}:{self.port}: {e}") from e
        self._runner = runner

    async def _open(self) -> tuple[TransportTarget, pysnmp.hlapi.v1arch.asyncio.SnmpDispatcher]:
        target_class = (
            pysnmp.hlapi.v1arch.asyncio.Udp6TransportTarget
            if self.address.family == 6
            else pysnmp.hlapi.v1arch.asyncio.UdpTransportTarget
        )
        target = await target_class.create(
            (str(self.address), self.port), timeout=self.config.timeout, retries=0
        )
        # The dispatcher binds to the running loop, so it is created in here
        return target, pysnmp.hlapi.v1arch.asyncio.SnmpDispatcher()

    def close(self) -> None:
        if self._runner is None:
            return
        self._logger.debug("Closing SNMP session to %s:%d", self.address, self.port)
        try:
            if self._dispatcher is not None:
                self._runner.run(_close_dispatcher(self._dispatcher))
        finally:
            self._runner.close()
            self._runner = None
            self._dispatcher = None
            self._target = None

    def get(self, /, oids: Sequence[OID]) -> Sequence[SNMPValue]:
        if self._runner is None or self._dispatcher is None or self._target is None:
            raise SNMPReadError("SNMP session is not open")

        self._logger.log(VERBOSE, "Getting OIDs %s", ", ".join(oids))
        try:
            error_indication, error_status, error_index, varbinds = self._runner.run(
                pysnmp.hlapi.v1arch.asyncio.get_cmd(
                    self._dispatcher,
                    pysnmp.hlapi.v1arch.asyncio.CommunityData(
                        self.config.credentials, mpModel=SNMPVersion.V1.value
                    ),
                    self._target,
                    # Plain (OID, value) pairs keep pysnmp away from MIB lookups
                    *((oid, pysnmp.proto.rfc1902.Null("")) for oid in oids),
                )
            )
        except (pysnmp.error.PySnmpError, pyasn1.error.PyAsn1Error, OSError) as e:
            raise SNMPReadError(f"Error talking to {self.address}: {e}") from e

        if error_indication:
            raise SNMPReadError(
                f"{error_indication} ({self.config.timeout}s, {self.address}:{self.port})"
            )
        if error_status:
            raise SNMPReadError(
                "Device reported %s at index %d" % (error_status.prettyPrint(), int(error_index))
            )
        if len(varbinds) != len(oids):
            raise SNMPReadError(f"Expected {len(oids)} values, got {len(varbinds)}")

        values = list(self._to_snmp_values(varbinds))
        for value in values:
            self._logger.debug("Got OID %s: %s %r", value.oid, value.type.value, value.value)
        return values

    @staticmethod
    def _to_snmp_values(varbinds: Iterable[VarBind]) -> Iterable[SNMPValue]:
        for name, value in varbinds:
            yield to_snmp_value("." + str(name), value)
