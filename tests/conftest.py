from __future__ import annotations

import textwrap
from pathlib import Path

import pytest


TARGET_SOURCE = '''
import subprocess
import sys

from subprocess_test import subprocess_test


@subprocess_test
def test_prints():
    print("out")
    print("err", file=sys.stderr)


@subprocess_test
def test_fails():
    print("before failure")
    raise ValueError("broken")


@subprocess_test
def test_spawns_sleeper():
    sleeper = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
    print(sleeper.pid)
'''


@pytest.fixture
def target_module(tmp_path: Path) -> Path:
    """A standalone test module whose tests are run as children."""

    path = tmp_path / "test_target_module.py"
    path.write_text(textwrap.dedent(TARGET_SOURCE), encoding="utf-8")
    return path
