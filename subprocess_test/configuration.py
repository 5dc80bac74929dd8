from __future__ import annotations

import os
import sys
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .exceptions import SetupError
from .utils import env_flag


DEFAULT_ENV_VAR_NAME = "__TEST_RUN_SUBPROCESS__"
DEFAULT_OUTPUT_BOUNDARY = "\n" + "=" * 40 + "\n"

PYTHON_ENV = "SUBPROCESS_TEST_PYTHON"
LAUNCHER_ENV = "SUBPROCESS_TEST_LAUNCHER"
VERBOSE_ENV = "SUBPROCESS_TEST_VERBOSE"
KEEP_LINGERING_ENV = "SUBPROCESS_TEST_KEEP_LINGERING"

LAUNCHER_NAMES = ("pytest", "unittest")


def default_launcher_name() -> str:
    """Pick the launcher matching the test runner hosting this process."""

    if "pytest" in sys.modules or "_pytest" in sys.modules:
        return "pytest"
    return "unittest"


@dataclass(frozen=True)
class RunnerConfig:
    """Process-wide defaults; per-test arguments take precedence."""

    env_var_name: str = DEFAULT_ENV_VAR_NAME
    output_boundary: Optional[str] = None
    launcher: Optional[str] = None
    python: Optional[str] = None
    verbose: bool = False
    kill_lingering: bool = True

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "RunnerConfig":
        source = os.environ if environ is None else environ

        launcher = source.get(LAUNCHER_ENV, "").strip().lower() or None
        if launcher is not None and launcher not in LAUNCHER_NAMES:
            raise SetupError(
                f"{LAUNCHER_ENV} must be one of {', '.join(LAUNCHER_NAMES)}, got {launcher!r}"
            )

        return cls(
            launcher=launcher,
            python=source.get(PYTHON_ENV) or None,
            verbose=env_flag(VERBOSE_ENV, source),
            kill_lingering=not env_flag(KEEP_LINGERING_ENV, source),
        )

    def with_overrides(self, **overrides: object) -> "RunnerConfig":
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def resolved_launcher(self) -> str:
        return self.launcher or default_launcher_name()

    def resolved_python(self) -> str:
        return self.python or sys.executable
