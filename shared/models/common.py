"""Common Pydantic models shared by the entrypoint and the operator CLI."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FailurePolicy(str, Enum):
    """What happens when a startup step exits non-zero."""

    FATAL = "fatal"
    TOLERATE = "tolerate"


class StepStatus(str, Enum):
    """Outcome of a single startup step."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TOLERATED = "tolerated"
    SKIPPED = "skipped"


class WaitTarget(BaseModel):
    """TCP address polled before the pipeline starts."""

    host: str = Field(..., description="Host name or address")
    port: int = Field(..., description="TCP port")

    model_config = ConfigDict(frozen=True)

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in the TCP range."""
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class StartupStep(BaseModel):
    """One external command in the startup pipeline."""

    name: str = Field(..., description="Step name used in logs and metrics")
    argv: List[str] = Field(..., description="Command and arguments")
    policy: FailurePolicy = Field(FailurePolicy.FATAL, description="Failure policy")
    fallback_message: Optional[str] = Field(
        None, description="Logged when a tolerated failure occurs"
    )
    enabled: bool = Field(True, description="Whether the step runs at all")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_argv(self) -> "StartupStep":
        """Validate an enabled step has a command."""
        if self.enabled and not self.argv:
            raise ValueError(f"step '{self.name}' has an empty command")
        return self


class StepResult(BaseModel):
    """Result of running a startup step."""

    step: str = Field(..., description="Step name")
    status: StepStatus = Field(..., description="Step outcome")
    returncode: Optional[int] = Field(None, description="Process exit code")
    duration_seconds: float = Field(0.0, description="Wall-clock duration")
    error: Optional[str] = Field(None, description="Launch error, if any")

    model_config = ConfigDict(use_enum_values=True)
