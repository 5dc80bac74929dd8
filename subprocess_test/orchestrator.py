"""Parent side of a subprocess test: launch the child and collect its output."""
from __future__ import annotations

import os
import subprocess
import tempfile
import time
from dataclasses import dataclass
from typing import Any, Dict, IO, List, Optional

from .configuration import PYTHON_ENV, RunnerConfig
from .exceptions import SetupError
from .launchers import Launcher, TestIdentity, get_launcher
from .outcome import Outcome
from .platform import PlatformSupport, get_platform_support
from .utils import format_duration, log_debug, log_warning


class OutputSink:
    """Anonymous temporary file receiving the child's stdout and stderr.

    The child gets the file as stdout and ``subprocess.STDOUT`` as stderr, so
    both streams share one open file description and keep their write order.
    The file is only read back after the child has exited.
    """

    def __init__(self) -> None:
        try:
            self._file: Optional[IO[bytes]] = tempfile.TemporaryFile()
        except OSError as exc:
            raise SetupError(f"Failed to create temporary file for subprocess output: {exc}") from exc

    @property
    def handle(self) -> IO[bytes]:
        if self._file is None:
            raise SetupError("Output sink is already closed")
        return self._file

    def read_all(self) -> str:
        handle = self.handle
        handle.flush()
        handle.seek(0)
        return handle.read().decode("utf-8", errors="replace")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "OutputSink":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(frozen=True)
class ChildRun:
    """Raw result of one child process."""

    command: List[str]
    outcome: Outcome
    captured: str
    duration: float


def build_child_environment(
    identity: TestIdentity,
    var_name: str,
    launcher: Launcher,
) -> Dict[str, str]:
    env = dict(os.environ)
    env[var_name] = ""
    env["PYTHONUNBUFFERED"] = "1"
    launcher.prepare_environment(identity, env)
    return env


def _reap_lingering(
    platform: PlatformSupport,
    pid: int,
    started: float,
    exited: float,
    *,
    verbose: bool,
) -> None:
    try:
        lingering = platform.collect_lingering_pids(pid, started, exited)
        killed = platform.kill_processes(lingering)
    except Exception as exc:
        log_warning(f"Failed to clean up processes left by child {pid}: {exc}")
        return
    if killed:
        log_debug(f"killed {len(killed)} lingering process(es) of child {pid}: {killed}", verbose=verbose)


def _abandon_child(platform: PlatformSupport, process: subprocess.Popen, started: float) -> None:
    """Kill a child that is still running, together with the processes it started."""

    try:
        lingering = platform.collect_lingering_pids(process.pid, started, time.time())
    except Exception as exc:
        log_warning(f"Failed to list processes of interrupted child {process.pid}: {exc}")
        lingering = []
    process.kill()
    platform.kill_processes([pid for pid in lingering if pid != process.pid])
    process.wait()


def run_parent(
    identity: TestIdentity,
    var_name: str,
    launcher: Optional[Launcher] = None,
    config: Optional[RunnerConfig] = None,
) -> ChildRun:
    """Run ``identity`` in a child process and return its status and output."""

    config = config if config is not None else RunnerConfig.from_environ()
    launcher = launcher if launcher is not None else get_launcher(config.resolved_launcher())
    platform = get_platform_support(verbose=config.verbose)

    python = config.resolved_python()
    if not python:
        raise SetupError(
            f"Cannot determine the interpreter to re-run tests with; set {PYTHON_ENV}"
        )

    command = launcher.build_command(identity, python)
    env = build_child_environment(identity, var_name, launcher)

    with OutputSink() as sink:
        popen_kwargs: Dict[str, Any] = {
            "stdin": subprocess.DEVNULL,
            "stdout": sink.handle,
            "stderr": subprocess.STDOUT,
            "env": env,
        }
        platform.configure_popen(popen_kwargs)

        log_debug(f"launching {identity}: {' '.join(command)}", verbose=config.verbose)
        started = time.time()
        start = time.monotonic()
        try:
            process = subprocess.Popen(command, **popen_kwargs)
        except OSError as exc:
            raise SetupError(f"Failed to execute test {identity} as subprocess: {exc}") from exc

        try:
            returncode = process.wait()
        except BaseException:
            # The child runs in its own session and never sees the interrupt.
            _abandon_child(platform, process, started)
            raise
        duration = time.monotonic() - start
        exited = time.time()

        if config.kill_lingering:
            _reap_lingering(platform, process.pid, started, exited, verbose=config.verbose)

        outcome = Outcome(returncode)
        log_debug(
            f"child of {identity} finished with {outcome.describe()} after {format_duration(duration)}",
            verbose=config.verbose,
        )
        captured = sink.read_all()

    return ChildRun(command=command, outcome=outcome, captured=captured, duration=duration)
