"""Boundary markers delimiting the child's test output.

The child prints the marker right before the test body runs and again once it
finishes, so the parent can strip whatever the inner test runner prints around
it. The marker is searched as a plain substring: a test body that prints the
exact marker text will truncate its own payload.
"""
from __future__ import annotations

from typing import Optional

from .configuration import DEFAULT_OUTPUT_BOUNDARY
from .exceptions import ProtocolError


_DIAGNOSTIC_TAIL = 2000


def effective_boundary(literal: Optional[str] = None) -> str:
    """Return the marker text for ``literal``, or the default marker."""

    if literal is None:
        return DEFAULT_OUTPUT_BOUNDARY
    return f"\n{literal}\n"


def extract_payload(captured: str, boundary: str) -> str:
    """Return the text between the first and second occurrence of ``boundary``.

    A missing second marker is expected when the child died without unwinding
    (``os.abort()``, a fatal signal), in which case everything after the first
    marker is the payload.
    """

    start = captured.find(boundary)
    if start < 0:
        tail = captured[-_DIAGNOSTIC_TAIL:]
        raise ProtocolError(
            "Subprocess output should always include at least one boundary; "
            f"child mode was never entered or output redirection is broken.\n"
            f"Captured output (tail):\n{tail}"
        )

    payload = captured[start + len(boundary):]
    end = payload.find(boundary)
    if end >= 0:
        payload = payload[:end]
    return payload
