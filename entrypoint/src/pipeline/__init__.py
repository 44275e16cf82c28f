"""Startup pipeline components."""

from .runner import StartupPipeline
from .steps import default_steps, server_step

__all__ = ["StartupPipeline", "default_steps", "server_step"]
