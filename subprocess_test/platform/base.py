from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import psutil


class PlatformSupport:
    """Abstract base class describing platform specific behaviour."""

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose = verbose

    def configure_popen(self, popen_kwargs: Dict[str, Any]) -> None:
        """Mutate ``popen_kwargs`` with platform specific settings."""

        popen_kwargs.setdefault("start_new_session", True)

    def is_crash_exit(self, returncode: Optional[int]) -> bool:
        """Return True if the exit code represents an abnormal termination."""

        if returncode is None:
            return True
        return returncode < 0

    def describe_returncode(self, returncode: Optional[int]) -> str:
        """Return a short human readable description of ``returncode``."""

        if returncode is None:
            return "no exit status"
        return f"exit code {returncode}"

    def collect_lingering_pids(self, pid: int, started: float, exited: float) -> List[int]:
        """Return processes left behind by the child ``pid``.

        ``started`` and ``exited`` bound the child's lifetime in ``time.time()``
        seconds; only processes created within it can belong to the child.
        """

        return []

    def kill_processes(self, pids: Sequence[int]) -> List[int]:
        """Kill ``pids`` and return the ones that were actually signalled."""

        killed: List[int] = []
        for pid in pids:
            try:
                psutil.Process(pid).kill()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            killed.append(pid)
        return killed
