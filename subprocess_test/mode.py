from __future__ import annotations

import enum
import os
from typing import Mapping, Optional

from .configuration import DEFAULT_ENV_VAR_NAME


class Mode(enum.Enum):
    PARENT = "parent"
    CHILD = "child"


def resolve_mode(var_name: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Mode:
    """Return ``Mode.CHILD`` when ``var_name`` is set, whatever its value."""

    source = os.environ if environ is None else environ
    if (var_name or DEFAULT_ENV_VAR_NAME) in source:
        return Mode.CHILD
    return Mode.PARENT
