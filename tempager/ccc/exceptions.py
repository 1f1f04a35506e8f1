#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""User-defined exceptions of the tempager checks."""

__all__ = [
    "MKException",
    "MKGeneralException",
    "MKSNMPError",
]


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class MKException(Exception):
    pass


class MKGeneralException(MKException):
    pass


class MKSNMPError(MKException):
    """An error talking SNMP to a device."""
