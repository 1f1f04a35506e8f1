#!/usr/bin/env python3
# Copyright (C) 2023 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import ipaddress

__all__ = ["IPAddress"]


class IPAddress(str):
    """A literal IPv4 or IPv6 address. Host names are not accepted."""

    @staticmethod
    def validate(text: str) -> None:
        """Check if it is an IP address

        >>> IPAddress.validate("10.0.0.5")
        >>> IPAddress.validate("fe80::1")

        >>> IPAddress.validate("tempager.example.com")
        Traceback (most recent call last):
            ...
        ValueError: Invalid IP address: 'tempager.example.com'
        """
        try:
            ipaddress.ip_address(text)
        except ValueError:
            raise ValueError(f"Invalid IP address: {text!r}") from None

    @staticmethod
    def is_valid(text: str) -> bool:
        try:
            IPAddress.validate(text)
            return True
        except ValueError:
            return False

    @property
    def family(self) -> int:
        """4 or 6

        >>> IPAddress("::1").family
        6
        """
        return ipaddress.ip_address(self).version

    def __new__(cls, text: str) -> IPAddress:
        """Construct a new IPAddress object

        Raises:
            - ValueError: whenever the given text is not a valid IP address
        """
        cls.validate(text)
        return super().__new__(cls, text)
