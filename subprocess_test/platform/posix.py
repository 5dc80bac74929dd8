from __future__ import annotations

import os
import signal
from typing import Dict, List, Optional

import psutil

from .base import PlatformSupport


class PosixPlatformSupport(PlatformSupport):
    """Platform helpers for Unix-like systems."""

    def configure_popen(self, popen_kwargs: Dict[str, object]) -> None:
        # The child leads its own session so leftovers can be found by pgid.
        popen_kwargs.setdefault("start_new_session", True)

    def is_crash_exit(self, returncode: Optional[int]) -> bool:
        if returncode is None:
            return True
        # Shells report signal deaths as 128 + signal number.
        return returncode < 0 or returncode > 128

    def describe_returncode(self, returncode: Optional[int]) -> str:
        if returncode is None:
            return "no exit status"
        if returncode < 0:
            number = -returncode
            try:
                name = signal.Signals(number).name
            except ValueError:
                name = "unknown signal"
            return f"killed by signal {number} ({name})"
        return f"exit code {returncode}"

    def collect_lingering_pids(self, pid: int, started: float, exited: float) -> List[int]:
        # After start_new_session the child's pid doubles as its process group
        # id, and the group outlives the leader while any member is alive.
        pids: List[int] = []
        for proc in psutil.process_iter(["pid"]):
            candidate = proc.info["pid"]
            if candidate == os.getpid():
                continue
            try:
                candidate_pgid = os.getpgid(candidate)
            except (ProcessLookupError, PermissionError):
                continue
            if candidate_pgid == pid:
                pids.append(candidate)
        return pids
