"""Startup error handling utilities."""

from .error_handler import (
    FatalStepError,
    ServerExecError,
    StartupError,
    WaitTimeoutError,
    classify_failure,
)

__all__ = [
    "FatalStepError",
    "ServerExecError",
    "StartupError",
    "WaitTimeoutError",
    "classify_failure",
]
