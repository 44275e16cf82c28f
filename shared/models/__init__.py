"""Shared Pydantic models for the startup pipeline."""

from .common import (
    FailurePolicy,
    StartupStep,
    StepResult,
    StepStatus,
    WaitTarget,
)

__all__ = [
    "FailurePolicy",
    "StartupStep",
    "StepResult",
    "StepStatus",
    "WaitTarget",
]
