"""Startup step definitions for the Medusa container."""

import shlex
from typing import List

from shared.models import FailurePolicy, StartupStep

from ..config import CommandsConfig


def tolerated_step(name: str, command: str, fallback_message: str, enabled: bool = True) -> StartupStep:
    """A log-and-continue step. An empty command disables it."""
    argv = shlex.split(command)
    return StartupStep(
        name=name,
        argv=argv,
        policy=FailurePolicy.TOLERATE,
        fallback_message=fallback_message,
        enabled=enabled and bool(argv),
    )


def default_steps(commands: CommandsConfig) -> List[StartupStep]:
    """Build the ordered pre-server steps: build, migrate, sync-links, seed.

    Raises:
        ValueError: If a command cannot be parsed or the build command is empty
    """
    return [
        StartupStep(
            name="build",
            argv=shlex.split(commands.build_command),
            policy=FailurePolicy.FATAL,
        ),
        tolerated_step("migrate", commands.migrate_command, "Migrations completed or already run"),
        tolerated_step("sync-links", commands.sync_links_command, "Links sync completed"),
        tolerated_step(
            "seed",
            commands.seed_command,
            "Seeding skipped or already done",
            enabled=not commands.skip_seed,
        ),
    ]


def server_step(commands: CommandsConfig) -> StartupStep:
    """The long-running server command that replaces the entrypoint."""
    return StartupStep(
        name="start",
        argv=shlex.split(commands.server_command),
        policy=FailurePolicy.FATAL,
    )
