"""pytest plugin shipped with subprocess_test.

Registered through the ``pytest11`` entry point. Tests marked ``ignored`` (or
generated with ``ignored=True``) are skipped unless ``--include-ignored`` is
given; child processes always pass it.
"""
from __future__ import annotations

from typing import List

import pytest

from .generator import IGNORED_ATTR


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("subprocess-test")
    group.addoption(
        "--include-ignored",
        action="store_true",
        default=False,
        help="run tests marked as ignored as well",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "ignored: skip the test unless --include-ignored is given",
    )


def _is_ignored(item: pytest.Item) -> bool:
    if item.get_closest_marker("ignored") is not None:
        return True
    return bool(getattr(getattr(item, "obj", None), IGNORED_ATTR, False))


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    if config.getoption("--include-ignored"):
        return
    skip_ignored = pytest.mark.skip(reason="ignored test (use --include-ignored to run)")
    for item in items:
        if _is_ignored(item):
            item.add_marker(skip_ignored)
