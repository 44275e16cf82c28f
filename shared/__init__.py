"""Modules shared by the entrypoint and the operator CLI."""
