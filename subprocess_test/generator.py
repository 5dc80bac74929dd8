"""Generation of subprocess test entry points.

Two front ends produce the same thing, a test function that hands its original
body to ``run_subprocess_test``:

* the ``subprocess_test`` decorator, for tests written as ordinary functions
  or ``TestCase`` methods;
* ``expand_tests``, which expands a declarative list of ``TestDeclaration``
  into module level test functions.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, MutableMapping, Optional, TypeVar, overload

from .exceptions import SetupError
from .launchers import TestIdentity
from .runner import run_subprocess_test
from .verify import VerifyFn


IGNORED_ATTR = "__subprocess_test_ignored__"
IDENTITY_ATTR = "__subprocess_test_identity__"

F = TypeVar("F", bound=Callable[..., Any])


def _make_entry(
    body: Callable[..., object],
    identity: TestIdentity,
    *,
    env_var_name: Optional[str],
    output_boundary: Optional[str],
    verify: Optional[VerifyFn],
    launcher: Optional[str],
) -> Callable[..., None]:
    def entry(*args: Any, **kwargs: Any) -> None:
        run_subprocess_test(
            identity,
            env_var_name,
            output_boundary,
            lambda: body(*args, **kwargs),
            verify,
            launcher,
        )

    return entry


@overload
def subprocess_test(func: F) -> F: ...


@overload
def subprocess_test(
    func: None = None,
    *,
    env_var_name: Optional[str] = None,
    output_boundary: Optional[str] = None,
    verify: Optional[VerifyFn] = None,
    launcher: Optional[str] = None,
    ignored: bool = False,
) -> Callable[[F], F]: ...


def subprocess_test(
    func: Optional[F] = None,
    *,
    env_var_name: Optional[str] = None,
    output_boundary: Optional[str] = None,
    verify: Optional[VerifyFn] = None,
    launcher: Optional[str] = None,
    ignored: bool = False,
):
    """Run the decorated test body in a child process.

    ``verify`` receives ``(outcome, output)`` in the parent; without it the
    test fails whenever the child does, showing the child's output.
    ``env_var_name`` and ``output_boundary`` override the marker variable and
    boundary literal. ``ignored`` skips the test in normal runs; the child is
    always started with ignored tests included.

    Pytest fixtures requested by the body are resolved in both processes.
    """

    def decorate(body: F) -> F:
        identity = TestIdentity.from_function(body)
        entry = _make_entry(
            body,
            identity,
            env_var_name=env_var_name,
            output_boundary=output_boundary,
            verify=verify,
            launcher=launcher,
        )
        entry = functools.wraps(body)(entry)
        setattr(entry, IDENTITY_ATTR, identity)
        if ignored:
            setattr(entry, IGNORED_ATTR, True)
        return entry  # type: ignore[return-value]

    if func is not None:
        return decorate(func)
    return decorate


@dataclass(frozen=True)
class TestDeclaration:
    """One entry of a declarative subprocess test list."""

    name: str
    body: Callable[[], object]
    verify: Optional[VerifyFn] = None
    env_var_name: Optional[str] = None
    output_boundary: Optional[str] = None
    launcher: Optional[str] = None
    ignored: bool = False

    __test__ = False


def expand_tests(
    namespace: MutableMapping[str, Any],
    declarations: Iterable[TestDeclaration],
) -> List[Callable[[], None]]:
    """Define one test function per declaration in ``namespace``.

    Call it with ``globals()`` of a test module; the generated functions are
    selectable by name like hand written ones.
    """

    module = namespace.get("__name__")
    source = namespace.get("__file__")
    if not module:
        raise SetupError("Namespace has no __name__; pass a module's globals()")
    path = Path(source).resolve() if source else None

    generated: Dict[str, Callable[[], None]] = {}
    for declaration in declarations:
        name = declaration.name
        if not name.isidentifier():
            raise SetupError(f"Test name {name!r} is not a valid identifier")
        if name in generated or name in namespace:
            raise SetupError(f"Test {name} is declared more than once in {module}")

        identity = TestIdentity(module=module, qualname=name, path=path)
        entry = _make_entry(
            declaration.body,
            identity,
            env_var_name=declaration.env_var_name,
            output_boundary=declaration.output_boundary,
            verify=declaration.verify,
            launcher=declaration.launcher,
        )
        entry.__name__ = name
        entry.__qualname__ = name
        entry.__module__ = module
        entry.__doc__ = getattr(declaration.body, "__doc__", None)
        setattr(entry, IDENTITY_ATTR, identity)
        if declaration.ignored:
            setattr(entry, IGNORED_ATTR, True)
        generated[name] = entry

    namespace.update(generated)
    return list(generated.values())
