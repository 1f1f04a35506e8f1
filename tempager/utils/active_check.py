#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Common frame of the active checks: logging setup, error handling and output"""

import sys
from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar

import tempager.ccc.debug
from tempager.ccc.exceptions import MKException
from tempager.utils import log
from tempager.utils.statename import service_state_name, State

CheckResult = tuple[State, str]


class ActiveCheckArgs(Protocol):
    @property
    def verbose(self) -> int: ...

    @property
    def debug(self) -> bool: ...


_ArgsT = TypeVar("_ArgsT", bound=ActiveCheckArgs)


def output_check_result(name: str, state: State, text: str) -> None:
    """Write the one line the monitoring core evaluates

    >>> output_check_result("check-foo", State.WARN, "Something strange | foo=1.00")
    check-foo WARNING: Something strange | foo=1.00
    """
    sys.stdout.write(f"{name} {service_state_name(state, 'UNKNOWN')}: {text}\n")


def active_check_main(
    name: str,
    parse_arguments: Callable[[Sequence[str]], _ArgsT],
    check_fn: Callable[[_ArgsT], CheckResult],
    argv: Sequence[str],
) -> int:
    """Evaluate the check, write output according to the monitoring plug-in API and
    return the exit code to terminate the program with:
    OK: 0
    WARN: 1
    CRIT: 2
    UNKNOWN: 3
    """
    args = parse_arguments(argv)

    log.setup_console_logging()
    log.logger.setLevel(log.verbosity_to_log_level(args.verbose))
    tempager.ccc.debug.set_enabled(args.debug)

    state, text = _active_check_main_core(check_fn, args)
    output_check_result(name, state, text)
    return int(state)


def _active_check_main_core(
    check_fn: Callable[[_ArgsT], CheckResult],
    args: _ArgsT,
) -> CheckResult:
    try:
        return check_fn(args)
    except MKException as e:
        log.logger.log(log.VERBOSE, "Check failed: %r", e)
        return State.CRIT, str(e)
    except Exception as e:
        if tempager.ccc.debug.enabled():
            raise
        log.logger.debug("Unhandled exception", exc_info=True)
        return State.CRIT, "Unhandled exception: %r" % e
