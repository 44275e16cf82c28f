"""Block until a TCP port accepts connections.

Polls at a fixed interval with no backoff. Without a timeout the wait is
unbounded: an unreachable database keeps the container in this loop.
"""

import socket
import time
from typing import Callable, Optional

import structlog

from shared.models import WaitTarget

from ..utils.error_handler import WaitTimeoutError

logger = structlog.get_logger(__name__)


class PortWaiter:
    """Poll a host/port until a connection succeeds."""

    def __init__(
        self,
        target: WaitTarget,
        interval: float = 2.0,
        connect_timeout: float = 2.0,
        timeout: Optional[float] = None,
        connect: Callable = socket.create_connection,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.target = target
        self.interval = interval
        self.connect_timeout = connect_timeout
        self.timeout = timeout
        self._connect = connect
        self._sleep = sleep
        self._clock = clock

        self.attempts = 0
        self.elapsed_seconds = 0.0

    def probe(self) -> bool:
        """Make a single connection attempt."""
        try:
            conn = self._connect(
                (self.target.host, self.target.port), timeout=self.connect_timeout
            )
        except OSError as e:
            logger.debug("probe_failed", target=str(self.target), error=str(e))
            return False

        conn.close()
        return True

    def wait(self) -> int:
        """
        Poll until the target accepts a connection.

        Returns:
            Number of attempts it took

        Raises:
            WaitTimeoutError: If a timeout is configured and passes first
        """
        logger.info("waiting_for_port", target=str(self.target), interval=self.interval)
        started = self._clock()
        self.attempts = 0

        while True:
            self.attempts += 1
            if self.probe():
                break

            self.elapsed_seconds = self._clock() - started
            if self.timeout is not None and self.elapsed_seconds >= self.timeout:
                logger.error(
                    "wait_timed_out",
                    target=str(self.target),
                    attempts=self.attempts,
                    elapsed_seconds=round(self.elapsed_seconds, 3),
                )
                raise WaitTimeoutError(str(self.target), self.attempts, self.elapsed_seconds)

            logger.info("port_not_ready", target=str(self.target), attempt=self.attempts)
            self._sleep(self.interval)

        self.elapsed_seconds = self._clock() - started
        logger.info(
            "port_ready",
            target=str(self.target),
            attempts=self.attempts,
            elapsed_seconds=round(self.elapsed_seconds, 3),
        )
        return self.attempts
