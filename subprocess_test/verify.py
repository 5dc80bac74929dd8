from __future__ import annotations

import sys
from typing import Callable

from .exceptions import SubprocessTestFailed
from .outcome import Outcome


VerifyFn = Callable[[Outcome, str], object]


def default_verify(test_name: str) -> VerifyFn:
    """Return the routine used when a test supplies no verification.

    A failed child fails the test; its output is written to stderr first so the
    parent's failure report shows what the child printed.
    """

    def verify(outcome: Outcome, output: str) -> None:
        if outcome:
            return
        sys.stderr.write(output)
        if output and not output.endswith("\n"):
            sys.stderr.write("\n")
        sys.stderr.flush()
        raise SubprocessTestFailed(test_name, outcome.describe(), output)

    return verify


def invoke_verify(verify_fn: VerifyFn, outcome: Outcome, output: str) -> None:
    verify_fn(outcome, output)
