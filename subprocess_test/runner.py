from __future__ import annotations

from typing import Callable, Optional, Union

from .boundary import effective_boundary, extract_payload
from .child import run_child
from .configuration import RunnerConfig
from .launchers import Launcher, TestIdentity, get_launcher
from .mode import Mode, resolve_mode
from .orchestrator import run_parent
from .outcome import ExecutionResult
from .verify import VerifyFn, default_verify, invoke_verify


def run_subprocess_test(
    identity: TestIdentity,
    var_name: Optional[str],
    boundary: Optional[str],
    test_fn: Callable[[], object],
    verify_fn: Optional[VerifyFn] = None,
    launcher: Union[Launcher, str, None] = None,
    config: Optional[RunnerConfig] = None,
) -> Optional[ExecutionResult]:
    """Run one generated subprocess test in whichever mode this process is in.

    In child mode the body runs between boundary markers and ``None`` is
    returned. In parent mode the test is re-run in a child process and the
    verification routine judges the extracted output.
    """

    config = config if config is not None else RunnerConfig.from_environ()
    var_name = var_name or config.env_var_name
    marker = effective_boundary(boundary if boundary is not None else config.output_boundary)

    if resolve_mode(var_name) is Mode.CHILD:
        run_child(marker, test_fn)
        return None

    if isinstance(launcher, str):
        launcher = get_launcher(launcher)

    identity = identity.for_current_item()

    child = run_parent(identity, var_name, launcher=launcher, config=config)
    output = extract_payload(child.captured, marker)

    if verify_fn is None:
        verify_fn = default_verify(identity.name)
    invoke_verify(verify_fn, child.outcome, output)

    return ExecutionResult(
        outcome=child.outcome,
        output=output,
        captured=child.captured,
        duration=child.duration,
    )
