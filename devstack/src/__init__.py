"""Operator commands for bringing the Medusa Docker environment up and down."""

__version__ = "0.1.0"
