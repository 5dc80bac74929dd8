from __future__ import annotations

import sys
import traceback
import unittest
from typing import Callable, Optional, TextIO, TypeVar


T = TypeVar("T")


def _emit(stream: TextIO, text: str) -> None:
    stream.write(text)
    stream.flush()


def _is_control_flow(exc: BaseException) -> bool:
    """Return True for exceptions that end a test without it failing."""

    if isinstance(exc, SystemExit):
        return exc.code in (None, 0)
    if isinstance(exc, unittest.SkipTest):
        return True
    pytest = sys.modules.get("pytest")
    if pytest is None:
        return False
    return isinstance(exc, (pytest.skip.Exception, pytest.xfail.Exception, pytest.exit.Exception))


def run_child(boundary: str, test_fn: Callable[[], T], stream: Optional[TextIO] = None) -> T:
    """Run ``test_fn`` between two boundary markers.

    The trailing marker is written from a ``finally`` block: it appears after a
    normal return and after an exception, but not when the process dies without
    unwinding. Exceptions are reported on stderr before the trailing marker,
    then propagated to the inner test runner. Skips, xfails and clean exits
    propagate without a report.
    """

    out = sys.stdout if stream is None else stream
    _emit(out, boundary)
    try:
        return test_fn()
    except BaseException as exc:
        if not _is_control_flow(exc):
            sys.stdout.flush()
            traceback.print_exc(file=sys.stderr)
            sys.stderr.flush()
        raise
    finally:
        _emit(out, boundary)
