"""Main entry point for the Medusa container.

Waits for the database port, runs build/migrate/sync-links/seed, then
replaces itself with the server process.
"""

import argparse
import sys
from typing import List, Optional

import structlog
from pydantic import ValidationError

from shared.logging import configure_logging
from shared.metrics import StartupMetrics

from .config import get_config
from .pipeline import StartupPipeline, default_steps, server_step
from .utils.error_handler import StartupError, WaitTimeoutError
from .wait import PortWaiter

logger = structlog.get_logger(__name__)

SERVICE_NAME = "medusa-entrypoint"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=SERVICE_NAME,
        description="Wait for the database, prepare the Medusa project and start the server.",
    )
    parser.add_argument("--skip-wait", action="store_true", help="Do not wait for the database port")
    parser.add_argument("--skip-seed", action="store_true", help="Do not run the seed step")
    parser.add_argument(
        "--dry-run", action="store_true", help="Log the startup plan and exit without running it"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = get_config()
    except (ValidationError, ValueError) as e:
        configure_logging(service_name=SERVICE_NAME)
        logger.error("config_invalid", error=str(e))
        return 1

    configure_logging(
        log_level=config.log_level,
        json_logs=config.json_logs,
        service_name=config.service_name,
    )

    commands = config.commands
    if args.skip_seed:
        commands = commands.model_copy(update={"skip_seed": True})

    # shlex and step validation both raise ValueError
    try:
        target = config.wait_target()
        steps = default_steps(commands)
        server = server_step(commands)
    except ValueError as e:
        logger.error("config_invalid", error=str(e))
        return 1

    metrics = StartupMetrics()
    pipeline = StartupPipeline(
        steps=steps,
        server=server,
        workdir=commands.workdir,
        metrics=metrics,
        metrics_textfile=config.metrics_textfile,
    )

    logger.info(
        "entrypoint_starting",
        service_name=config.service_name,
        wait_target=str(target),
        steps=[step.name for step in pipeline.steps if step.enabled],
        server=pipeline.server.argv,
    )

    if args.dry_run:
        logger.info("dry_run_complete")
        return 0

    try:
        if not args.skip_wait:
            waiter = PortWaiter(
                target,
                interval=config.wait.interval,
                connect_timeout=config.wait.connect_timeout,
                timeout=config.wait.timeout,
            )
            attempts = waiter.wait()
            metrics.record_wait(str(target), attempts, waiter.elapsed_seconds)

        pipeline.start()
    except StartupError as e:
        if isinstance(e, WaitTimeoutError):
            metrics.record_wait(e.target, e.attempts, e.elapsed_seconds)
        pipeline.flush_metrics()
        logger.error("startup_aborted", error=str(e))
        return e.exit_code
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt_received")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
