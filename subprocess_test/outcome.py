from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .platform import get_platform_support


@dataclass(frozen=True)
class Outcome:
    """Termination status of a child run.

    Truthiness follows ``success`` so verification routines can write
    ``assert outcome`` or ``assert not outcome``; ``returncode`` is the raw
    status reported by ``subprocess`` (negative signal number on POSIX).
    """

    returncode: Optional[int]

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def __bool__(self) -> bool:
        return self.success

    @property
    def signal_number(self) -> Optional[int]:
        if self.returncode is None or self.returncode >= 0:
            return None
        return -self.returncode

    @property
    def crashed(self) -> bool:
        return get_platform_support().is_crash_exit(self.returncode)

    def describe(self) -> str:
        if self.success:
            return "success"
        return get_platform_support().describe_returncode(self.returncode)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome and extracted payload of one parent-mode run."""

    outcome: Outcome
    output: str
    captured: str
    duration: float

    @property
    def success(self) -> bool:
        return self.outcome.success
