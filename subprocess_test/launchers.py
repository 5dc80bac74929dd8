"""Re-invocation of the current test runner restricted to one test.

A launcher turns a ``TestIdentity`` into a command line that runs exactly that
test, including tests marked as ignored, with output capturing disabled and the
runner's own chatter reduced.
"""
from __future__ import annotations

import inspect
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from .exceptions import SetupError


@dataclass(frozen=True)
class TestIdentity:
    """Fully qualified name of one test function."""

    module: str
    qualname: str
    path: Optional[Path] = None
    # pytest parametrization id including brackets, e.g. "[alpha]"
    params: str = ""

    __test__ = False

    @classmethod
    def from_function(cls, func: Callable[..., object]) -> "TestIdentity":
        qualname = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
        if not qualname:
            raise SetupError(f"Cannot derive a test name from {func!r}")
        if "<locals>" in qualname:
            raise SetupError(
                f"Test {qualname} is defined in a local scope and cannot be selected in a subprocess"
            )
        try:
            source = inspect.getsourcefile(func) or inspect.getfile(func)
        except TypeError:
            source = None
        path = Path(source).resolve() if source else None
        return cls(module=func.__module__, qualname=qualname, path=path)

    @classmethod
    def from_nodeid(cls, nodeid: str) -> "TestIdentity":
        """Build an identity from a pytest node id such as ``tests/test_x.py::TestA::test_b``."""

        path_part, sep, rest = nodeid.partition("::")
        if not sep or not rest:
            raise SetupError(f"Node id {nodeid!r} does not name a test function")
        names, bracket, params = rest.partition("[")
        path = Path(path_part).resolve()
        return cls(
            module=path.stem,
            qualname=names.replace("::", "."),
            path=path,
            params=bracket + params,
        )

    @property
    def name(self) -> str:
        return self.qualname.rsplit(".", 1)[-1]

    @property
    def full_name(self) -> str:
        return f"{self.module}::{self.qualname}{self.params}"

    def for_current_item(self, environ: Optional[Mapping[str, str]] = None) -> "TestIdentity":
        """Return this identity narrowed to the pytest item currently running.

        A parametrized test shares one function between several items; the
        running item's id is read from ``PYTEST_CURRENT_TEST``, which pytest
        sets to ``"<nodeid> (<phase>)"``.
        """

        environ = os.environ if environ is None else environ
        current = environ.get("PYTEST_CURRENT_TEST")
        if not current or self.params:
            return self
        nodeid = current.rsplit(" ", 1)[0]
        base, bracket, rest = nodeid.partition("[")
        if not bracket or base.rsplit("::", 1)[-1] != self.name:
            return self
        return replace(self, params=bracket + rest)

    def __str__(self) -> str:
        return self.full_name


class Launcher(ABC):
    """Strategy describing how to re-run one test in a fresh interpreter."""

    name = ""

    @abstractmethod
    def selector(self, identity: TestIdentity) -> str:
        """Return the argument selecting exactly ``identity``."""

    @abstractmethod
    def build_command(self, identity: TestIdentity, python: str) -> List[str]:
        """Return the child command line."""

    def prepare_environment(self, identity: TestIdentity, env: Dict[str, str]) -> None:
        """Mutate ``env`` with launcher specific settings."""


class PytestLauncher(Launcher):
    name = "pytest"

    def selector(self, identity: TestIdentity) -> str:
        if identity.path is None:
            raise SetupError(f"Source file of test {identity} is unknown")
        return "::".join([str(identity.path), *identity.qualname.split(".")]) + identity.params

    def build_command(self, identity: TestIdentity, python: str) -> List[str]:
        return [
            python,
            "-u",
            "-m",
            "pytest",
            self.selector(identity),
            "-q",
            "-s",
            "--include-ignored",
            "-p",
            "no:cacheprovider",
            "-p",
            "no:faulthandler",
        ]


class UnittestLauncher(Launcher):
    name = "unittest"

    @staticmethod
    def _module_name(identity: TestIdentity) -> str:
        if identity.module == "__main__":
            if identity.path is None:
                raise SetupError(f"Source file of test {identity} is unknown")
            return identity.path.stem
        return identity.module

    def selector(self, identity: TestIdentity) -> str:
        if "." not in identity.qualname:
            raise SetupError(
                f"Test {identity} is not a TestCase method; unittest can only select methods"
            )
        return f"{self._module_name(identity)}.{identity.qualname}"

    def build_command(self, identity: TestIdentity, python: str) -> List[str]:
        return [python, "-u", "-m", "unittest", "-q", self.selector(identity)]

    def import_root(self, identity: TestIdentity) -> Optional[Path]:
        """Return the directory the test module is importable from."""

        if identity.path is None:
            return None
        depth = len(self._module_name(identity).split("."))
        root = identity.path.parent
        for _ in range(depth - 1):
            root = root.parent
        return root

    def prepare_environment(self, identity: TestIdentity, env: Dict[str, str]) -> None:
        root = self.import_root(identity)
        if root is None:
            return
        existing = env.get("PYTHONPATH")
        env["PYTHONPATH"] = str(root) if not existing else os.pathsep.join([str(root), existing])


_LAUNCHERS = {
    PytestLauncher.name: PytestLauncher,
    UnittestLauncher.name: UnittestLauncher,
}


def get_launcher(name: str) -> Launcher:
    """Return the launcher registered under ``name``."""

    try:
        return _LAUNCHERS[name]()
    except KeyError:
        raise SetupError(
            f"Unknown launcher {name!r}; expected one of {', '.join(sorted(_LAUNCHERS))}"
        ) from None
