"""
Sequential startup pipeline.

Runs each step once, in order, as a child process sharing the container's
stdout/stderr. Fatal failures abort the pipeline; tolerated failures are
logged with their fallback message and the next step runs. The server
command is exec'd last and replaces this process.
"""

import os
import subprocess
import sys
import time
from typing import Callable, Dict, List, Optional

import structlog

from shared.metrics import StartupMetrics
from shared.models import StartupStep, StepResult, StepStatus

from ..utils.error_handler import FatalStepError, ServerExecError, classify_failure

logger = structlog.get_logger(__name__)


class StartupPipeline:
    """Fixed linear pipeline of external commands ending in a server exec."""

    def __init__(
        self,
        steps: List[StartupStep],
        server: StartupStep,
        workdir: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        metrics: Optional[StartupMetrics] = None,
        metrics_textfile: Optional[str] = None,
        run: Callable = subprocess.run,
        execvpe: Callable = os.execvpe,
        chdir: Callable[[str], None] = os.chdir,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.steps = steps
        self.server = server
        self.workdir = workdir
        self.env = dict(os.environ) if env is None else env
        self.metrics = metrics
        self.metrics_textfile = metrics_textfile
        self._run = run
        self._execvpe = execvpe
        self._chdir = chdir
        self._clock = clock

        self.results: List[StepResult] = []

    def run_step(self, step: StartupStep) -> StepResult:
        """
        Run a single step.

        Returns:
            StepResult for a succeeded, tolerated or skipped step

        Raises:
            FatalStepError: If a fatal step fails
        """
        if not step.enabled:
            logger.info("step_skipped", step=step.name)
            result = StepResult(step=step.name, status=StepStatus.SKIPPED)
            self._record(result)
            return result

        logger.info("step_started", step=step.name, argv=step.argv)
        started = self._clock()
        returncode: Optional[int] = None
        error: Optional[str] = None

        try:
            completed = self._run(step.argv, cwd=self.workdir, env=self.env, check=False)
            returncode = completed.returncode
        except OSError as e:
            error = str(e)

        result = StepResult(
            step=step.name,
            status=classify_failure(step, returncode),
            returncode=returncode,
            duration_seconds=self._clock() - started,
            error=error,
        )
        self._record(result)

        if result.status == StepStatus.SUCCEEDED:
            logger.info(
                "step_succeeded",
                step=step.name,
                duration_seconds=round(result.duration_seconds, 3),
            )
        elif result.status == StepStatus.TOLERATED:
            logger.warning(
                "step_tolerated",
                step=step.name,
                returncode=returncode,
                error=error,
                message=step.fallback_message,
            )
        else:
            logger.error("step_failed", step=step.name, returncode=returncode, error=error)
            raise FatalStepError(result)

        return result

    def run(self) -> List[StepResult]:
        """Run every pre-server step in order."""
        for step in self.steps:
            self.run_step(step)
        return self.results

    def exec_server(self) -> None:
        """
        Replace the current process with the server command.

        Does not return when the exec succeeds.

        Raises:
            ServerExecError: If the server binary cannot be executed
        """
        argv = self.server.argv
        logger.info("starting_server", argv=argv, workdir=self.workdir)
        self.flush_metrics()

        # exec discards Python's buffers
        sys.stdout.flush()
        sys.stderr.flush()

        try:
            if self.workdir:
                self._chdir(self.workdir)
            self._execvpe(argv[0], argv, self.env)
        except OSError as e:
            logger.error("server_exec_failed", argv=argv, error=str(e))
            raise ServerExecError(f"Could not start server {argv[0]!r}: {e}") from e

    def start(self) -> None:
        """Run the pipeline, then hand off to the server."""
        self.run()
        self.exec_server()

    def _record(self, result: StepResult) -> None:
        self.results.append(result)
        if self.metrics is not None:
            self.metrics.record_step(result.step, StepStatus(result.status).value, result.duration_seconds)

    def flush_metrics(self) -> None:
        """Write metrics to the textfile, if one is configured."""
        if self.metrics is None or not self.metrics_textfile:
            return
        try:
            self.metrics.write_textfile(self.metrics_textfile)
        except OSError as e:
            logger.warning("metrics_write_failed", path=self.metrics_textfile, error=str(e))
