#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Iterator

import pytest

import tempager.ccc.debug
from tempager.utils import log


@pytest.fixture(autouse=True)
def _reset_global_state() -> Iterator[None]:
    yield
    tempager.ccc.debug.set_enabled(False)
    log.clear_console_logging()
