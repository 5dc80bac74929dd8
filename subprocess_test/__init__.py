"""Run a test body in a re-invoked child process and verify its output.

A decorated test runs twice: the normal run re-launches the test runner for
exactly that test with a marker environment variable set, captures the child's
combined stdout and stderr, and passes ``(outcome, output)`` to a verification
routine. The child run executes the body between two boundary markers, which
lets the parent observe tests that abort or crash the interpreter.

Example::

    from subprocess_test import subprocess_test

    def check_output(outcome, output):
        assert outcome
        assert output == "2\\n"

    @subprocess_test(verify=check_output)
    def test_one_plus_one():
        print(1 + 1)
"""
from __future__ import annotations

from .boundary import effective_boundary, extract_payload
from .configuration import DEFAULT_ENV_VAR_NAME, DEFAULT_OUTPUT_BOUNDARY, RunnerConfig
from .exceptions import ProtocolError, SetupError, SubprocessTestError, SubprocessTestFailed
from .generator import TestDeclaration, expand_tests, subprocess_test
from .launchers import Launcher, PytestLauncher, TestIdentity, UnittestLauncher, get_launcher
from .mode import Mode, resolve_mode
from .outcome import ExecutionResult, Outcome
from .runner import run_subprocess_test
from .verify import default_verify


__all__ = [
    "DEFAULT_ENV_VAR_NAME",
    "DEFAULT_OUTPUT_BOUNDARY",
    "ExecutionResult",
    "Launcher",
    "Mode",
    "Outcome",
    "ProtocolError",
    "PytestLauncher",
    "RunnerConfig",
    "SetupError",
    "SubprocessTestError",
    "SubprocessTestFailed",
    "TestDeclaration",
    "TestIdentity",
    "UnittestLauncher",
    "default_verify",
    "effective_boundary",
    "expand_tests",
    "extract_payload",
    "get_launcher",
    "resolve_mode",
    "run_subprocess_test",
    "subprocess_test",
]
