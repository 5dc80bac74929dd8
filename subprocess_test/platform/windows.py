from __future__ import annotations

import subprocess
from typing import Dict, List, Optional

import psutil

from .base import PlatformSupport


_NTSTATUS_NAMES = {
    0xC0000005: "STATUS_ACCESS_VIOLATION",
    0xC000001D: "STATUS_ILLEGAL_INSTRUCTION",
    0xC0000094: "STATUS_INTEGER_DIVIDE_BY_ZERO",
    0xC00000FD: "STATUS_STACK_OVERFLOW",
    0xC0000409: "STATUS_STACK_BUFFER_OVERRUN",
    0xC000013A: "STATUS_CONTROL_C_EXIT",
}


class WindowsPlatformSupport(PlatformSupport):
    """Platform helpers for Windows hosts."""

    def configure_popen(self, popen_kwargs: Dict[str, object]) -> None:
        creationflags = 0
        if hasattr(subprocess, "CREATE_NEW_PROCESS_GROUP"):
            creationflags = subprocess.CREATE_NEW_PROCESS_GROUP
        popen_kwargs["creationflags"] = creationflags

    def is_crash_exit(self, returncode: Optional[int]) -> bool:
        if returncode is None:
            return True
        # Windows crash codes are typically large unsigned values such as 0xC0000005.
        return returncode < 0 or (returncode & 0xFFFFFFFF) >= 0xC0000000

    def describe_returncode(self, returncode: Optional[int]) -> str:
        if returncode is None:
            return "no exit status"
        unsigned = returncode & 0xFFFFFFFF
        name = _NTSTATUS_NAMES.get(unsigned)
        if name is not None:
            return f"exit code 0x{unsigned:08X} ({name})"
        if unsigned >= 0xC0000000:
            return f"exit code 0x{unsigned:08X}"
        return f"exit code {returncode}"

    def collect_lingering_pids(self, pid: int, started: float, exited: float) -> List[int]:
        # Orphans keep reporting the dead child as their parent on Windows, but
        # the pid may already belong to an unrelated process. Its children are
        # created after the child exited, so the lifetime window excludes them.
        pids: List[int] = []
        for proc in psutil.process_iter(["pid", "ppid", "create_time"]):
            if proc.info.get("ppid") != pid or proc.info["pid"] == pid:
                continue
            created = proc.info.get("create_time")
            if created is None or not started <= created <= exited:
                continue
            pids.append(proc.info["pid"])
            try:
                pids.extend(child.pid for child in proc.children(recursive=True))
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return pids
