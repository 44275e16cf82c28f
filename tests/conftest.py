"""Shared pytest fixtures."""

import pytest

from entrypoint.src import config as config_module

STARTUP_ENV_VARS = [
    "DATABASE_URL",
    "REDIS_URL",
    "NODE_ENV",
    "LOG_LEVEL",
    "JSON_LOGS",
    "METRICS_TEXTFILE",
    "STARTUP_WAIT_HOST",
    "STARTUP_WAIT_PORT",
    "STARTUP_WAIT_INTERVAL",
    "STARTUP_WAIT_CONNECT_TIMEOUT",
    "STARTUP_CONNECT_TIMEOUT",
    "STARTUP_WAIT_TIMEOUT",
    "STARTUP_BUILD_COMMAND",
    "STARTUP_MIGRATE_COMMAND",
    "STARTUP_SYNC_LINKS_COMMAND",
    "STARTUP_SEED_COMMAND",
    "STARTUP_SERVER_COMMAND",
    "STARTUP_SKIP_SEED",
    "STARTUP_WORKDIR",
    "MEDUSA_ADMIN_PASSWORD",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the host environment and any .env file."""
    for name in STARTUP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    config_module.reset_config()
    yield monkeypatch
    config_module.reset_config()
