#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from ._typedefs import (
    OID,
    SNMPBackend,
    SNMPCommunity,
    SNMPConnectionError,
    SNMPHostConfig,
    SNMPReadError,
    SNMPValue,
    SNMPValueType,
    SNMPVersion,
)
from ._udp import UDPSNMPBackend

__all__ = [
    "OID",
    "SNMPBackend",
    "SNMPCommunity",
    "SNMPConnectionError",
    "SNMPHostConfig",
    "SNMPReadError",
    "SNMPValue",
    "SNMPValueType",
    "SNMPVersion",
    "UDPSNMPBackend",
]
