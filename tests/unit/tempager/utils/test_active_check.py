#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import argparse
import logging
from collections.abc import Sequence

import pytest

import tempager.ccc.debug
from tempager.ccc.exceptions import MKGeneralException
from tempager.utils import log
from tempager.utils.active_check import active_check_main, CheckResult, output_check_result
from tempager.utils.statename import State


def _parse_arguments(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("-v", "--verbose", action="count", default=0)
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def _raise(exc: Exception) -> CheckResult:
    raise exc


@pytest.mark.parametrize(
    "state, expected",
    [
        (State.OK, "check-foo OK: all fine\n"),
        (State.WARN, "check-foo WARNING: all fine\n"),
        (State.CRIT, "check-foo CRITICAL: all fine\n"),
        (State.UNKNOWN, "check-foo UNKNOWN: all fine\n"),
    ],
)
def test_output_check_result(
    state: State, expected: str, capsys: pytest.CaptureFixture[str]
) -> None:
    output_check_result("check-foo", state, "all fine")
    assert capsys.readouterr().out == expected


@pytest.mark.parametrize("state", list(State))
def test_exit_code_is_the_state(state: State, capsys: pytest.CaptureFixture[str]) -> None:
    assert active_check_main("check-foo", _parse_arguments, lambda args: (state, "x"), []) == state
    capsys.readouterr()


def test_mk_exception_is_critical(capsys: pytest.CaptureFixture[str]) -> None:
    assert (
        active_check_main(
            "check-foo",
            _parse_arguments,
            lambda args: _raise(MKGeneralException("device on fire.")),
            [],
        )
        == 2
    )
    assert capsys.readouterr().out == "check-foo CRITICAL: device on fire.\n"


def test_mk_exception_is_critical_in_debug_mode(capsys: pytest.CaptureFixture[str]) -> None:
    assert (
        active_check_main(
            "check-foo",
            _parse_arguments,
            lambda args: _raise(MKGeneralException("device on fire.")),
            ["--debug"],
        )
        == 2
    )
    assert capsys.readouterr().out == "check-foo CRITICAL: device on fire.\n"


def test_unhandled_exception(capsys: pytest.CaptureFixture[str]) -> None:
    assert (
        active_check_main(
            "check-foo", _parse_arguments, lambda args: _raise(KeyError("spam")), []
        )
        == 2
    )
    assert capsys.readouterr().out == "check-foo CRITICAL: Unhandled exception: KeyError('spam')\n"


def test_unhandled_exception_in_debug_mode() -> None:
    with pytest.raises(KeyError):
        active_check_main(
            "check-foo", _parse_arguments, lambda args: _raise(KeyError("spam")), ["--debug"]
        )
    assert tempager.ccc.debug.enabled()


@pytest.mark.parametrize(
    "argv, level",
    [([], logging.WARNING), (["-v"], log.VERBOSE), (["-vv"], logging.DEBUG)],
)
def test_verbosity(argv: list[str], level: int, capsys: pytest.CaptureFixture[str]) -> None:
    def check(args: argparse.Namespace) -> CheckResult:
        logging.getLogger("tempager.foo").log(log.VERBOSE, "verbose message")
        return State.OK, "done"

    active_check_main("check-foo", _parse_arguments, check, argv)

    assert log.logger.level == level
    captured = capsys.readouterr()
    assert captured.out == "check-foo OK: done\n"
    assert ("verbose message" in captured.err) is (level <= log.VERBOSE)
