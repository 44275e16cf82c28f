"""
Operator CLI for the Medusa development stack.

Usage:
  devstack up                 # docker compose up --build -d
  devstack down [--volumes]   # docker compose down
  devstack create-user --email admin@example.com --password <pw>
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import structlog

from shared.logging import configure_logging

from .compose import DEFAULT_COMPOSE_FILE, DEFAULT_SERVICE, ComposeClient, ComposeCommandError

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="devstack", description="Manage the Medusa Docker environment")
    parser.add_argument("-f", "--file", default=DEFAULT_COMPOSE_FILE, help="Compose file")
    parser.add_argument("--project-dir", type=Path, default=None, help="Directory holding the compose file")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    sub = parser.add_subparsers(dest="command", required=True)

    up = sub.add_parser("up", help="Build and start the environment")
    up.add_argument("--no-build", action="store_true", help="Do not rebuild images")
    up.add_argument("--attach", action="store_true", help="Stay attached to container output")

    down = sub.add_parser("down", help="Stop the environment")
    down.add_argument("-v", "--volumes", action="store_true", help="Also remove named volumes")

    user = sub.add_parser("create-user", help="Create a Medusa admin user")
    user.add_argument("-e", "--email", required=True)
    user.add_argument("-p", "--password", default=None, help="Defaults to $MEDUSA_ADMIN_PASSWORD")
    user.add_argument("--service", default=DEFAULT_SERVICE)

    return parser


def main(argv: list[str] | None = None, client: ComposeClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        json_logs=args.json_logs,
        service_name="devstack",
    )

    if client is None:
        client = ComposeClient(compose_file=args.file, project_dir=args.project_dir)

    try:
        if args.command == "up":
            client.up(build=not args.no_build, detach=not args.attach)
        elif args.command == "down":
            client.down(volumes=args.volumes)
        elif args.command == "create-user":
            password = args.password or os.getenv("MEDUSA_ADMIN_PASSWORD")
            if not password:
                logger.error("missing_password", hint="pass --password or set MEDUSA_ADMIN_PASSWORD")
                return 2
            client.create_user(args.email, password, service=args.service)
            logger.info("user_created", email=args.email)
    except ComposeCommandError as e:
        return e.returncode
    except FileNotFoundError as e:
        logger.error("docker_not_found", error=str(e))
        return 127

    return 0


if __name__ == "__main__":
    sys.exit(main())
