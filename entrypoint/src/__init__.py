"""Container entrypoint for the Medusa development stack.

Waits for Postgres, runs the build, migration, link-sync and seed commands,
then execs the Medusa server.
"""

__version__ = "0.1.0"
