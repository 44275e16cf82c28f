"""Thin wrapper around `docker compose` for the Medusa development stack."""

import subprocess
from pathlib import Path
from typing import Callable, List, Optional

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_COMPOSE_FILE = "docker-compose.yml"
DEFAULT_SERVICE = "medusa"


class ComposeCommandError(Exception):
    """A docker compose invocation exited non-zero."""

    def __init__(self, argv: List[str], returncode: int):
        self.argv = argv
        self.returncode = returncode
        super().__init__(f"{' '.join(argv[:4])} ... exited with status {returncode}")


class ComposeClient:
    """Run docker compose commands against one compose file."""

    def __init__(
        self,
        compose_file: str = DEFAULT_COMPOSE_FILE,
        project_dir: Optional[Path] = None,
        docker_binary: str = "docker",
        run: Callable = subprocess.run,
    ):
        self.compose_file = compose_file
        self.project_dir = project_dir or Path.cwd()
        self.docker_binary = docker_binary
        self._run = run

    def base_command(self) -> List[str]:
        return [self.docker_binary, "compose", "-f", self.compose_file]

    def _execute(self, args: List[str], redact: Optional[str] = None) -> int:
        argv = self.base_command() + args
        shown = [("***" if redact and part == redact else part) for part in argv]
        logger.info("compose_command", argv=shown)

        completed = self._run(argv, cwd=str(self.project_dir), check=False)
        if completed.returncode != 0:
            logger.error("compose_command_failed", argv=shown, returncode=completed.returncode)
            raise ComposeCommandError(shown, completed.returncode)
        return completed.returncode

    def up(self, build: bool = True, detach: bool = True) -> int:
        """Build images if needed and start every service."""
        args = ["up"]
        if build:
            args.append("--build")
        if detach:
            args.append("-d")
        return self._execute(args)

    def down(self, volumes: bool = False) -> int:
        """Stop and remove the containers and network."""
        args = ["down"]
        if volumes:
            args.append("-v")
        return self._execute(args)

    def create_user(self, email: str, password: str, service: str = DEFAULT_SERVICE) -> int:
        """Create an admin user through the Medusa CLI inside the running container."""
        if not email or not password:
            raise ValueError("email and password are required")
        args = ["exec", service, "npx", "medusa", "user", "-e", email, "-p", password]
        return self._execute(args, redact=password)
