"""Error taxonomy of the harness.

Harness errors (``SetupError``, ``ProtocolError``) mean the parent/child wiring
is broken and are never reported as an ordinary test failure.
``SubprocessTestFailed`` is the assertion raised by the default verification
when the child did not succeed.
"""
from __future__ import annotations


class SubprocessTestError(RuntimeError):
    """Base class for harness failures."""


class SetupError(SubprocessTestError):
    """The child process could not be prepared or launched."""


class ProtocolError(SubprocessTestError):
    """The captured output does not follow the boundary protocol."""


class SubprocessTestFailed(AssertionError):
    """Raised by the default verification when the child run failed."""

    def __init__(self, test_name: str, description: str, output: str) -> None:
        super().__init__(f"Test {test_name} subprocess failed ({description})")
        self.test_name = test_name
        self.description = description
        self.output = output
