"""
Error types and failure classification for the startup pipeline.

Two policies exist: a fatal step aborts startup, a tolerated step logs its
fallback message and lets the pipeline continue. There is no retry; every
step gets exactly one attempt.
"""

from typing import Optional

from shared.models import FailurePolicy, StartupStep, StepResult, StepStatus


class StartupError(Exception):
    """Base class for errors that abort container startup."""

    exit_code = 1


class WaitTimeoutError(StartupError):
    """Dependency did not accept connections before the deadline."""

    def __init__(self, target: str, attempts: int, elapsed_seconds: float):
        self.target = target
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"{target} not reachable after {attempts} attempts ({elapsed_seconds:.1f}s)"
        )


class FatalStepError(StartupError):
    """A step with a fatal policy failed."""

    def __init__(self, result: StepResult):
        self.result = result
        detail = result.error or f"exit code {result.returncode}"
        super().__init__(f"Step '{result.step}' failed: {detail}")

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        returncode = self.result.returncode
        if not returncode:
            return 1
        # killed by signal N: report 128+N like a shell
        if returncode < 0:
            return 128 - returncode
        return returncode


class ServerExecError(StartupError):
    """The server process could not replace the entrypoint."""


def classify_failure(step: StartupStep, returncode: Optional[int]) -> StepStatus:
    """
    Classify a finished step.

    Args:
        step: The step that ran
        returncode: Process exit code, or None if it could not be launched

    Returns:
        StepStatus for the result
    """
    if returncode == 0:
        return StepStatus.SUCCEEDED

    if step.policy == FailurePolicy.TOLERATE:
        return StepStatus.TOLERATED

    return StepStatus.FAILED
