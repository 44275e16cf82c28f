"""Dependency wait components."""

from .port_waiter import PortWaiter

__all__ = ["PortWaiter"]
