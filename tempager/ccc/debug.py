#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Switch of the --debug option

With debug mode enabled, unexpected exceptions of a check are not turned
into a CRIT result but propagate with their traceback.
"""

_debug_mode = False


def enabled() -> bool:
    return _debug_mode


def set_enabled(value: bool) -> None:
    global _debug_mode
    _debug_mode = value
