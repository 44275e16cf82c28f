"""Unit tests for entrypoint configuration."""

import pytest
from pydantic import ValidationError

from entrypoint.src.config import CommandsConfig, Config, WaitConfig, get_config, reset_config

pytestmark = pytest.mark.usefixtures("clean_env")


class TestDefaults:
    """Test default values match the stock Medusa container"""

    def test_wait_defaults(self):
        wait = WaitConfig()

        assert wait.interval == 2.0
        assert wait.timeout is None

    def test_command_defaults(self):
        commands = CommandsConfig()

        assert commands.build_command == "npm run build"
        assert commands.migrate_command == "npx medusa db:migrate"
        assert commands.sync_links_command == "npx medusa db:sync-links"
        assert commands.seed_command == "npx medusa exec ./src/scripts/seed.ts"
        assert commands.server_command == "npm run start"
        assert commands.workdir == "/server"
        assert commands.skip_seed is False

    def test_default_wait_target(self):
        assert str(Config().wait_target()) == "postgres:5432"


class TestEnvironmentOverrides:
    """Test environment variable loading"""

    def test_wait_env(self, clean_env):
        clean_env.setenv("STARTUP_WAIT_HOST", "db")
        clean_env.setenv("STARTUP_WAIT_PORT", "15432")
        clean_env.setenv("STARTUP_WAIT_INTERVAL", "0.5")
        clean_env.setenv("STARTUP_WAIT_TIMEOUT", "60")

        config = Config()

        assert str(config.wait_target()) == "db:15432"
        assert config.wait.interval == 0.5
        assert config.wait.timeout == 60.0

    def test_command_env(self, clean_env):
        clean_env.setenv("STARTUP_SKIP_SEED", "true")
        clean_env.setenv("STARTUP_SERVER_COMMAND", "npx medusa develop")

        commands = Config().commands

        assert commands.skip_seed is True
        assert commands.server_command == "npx medusa develop"

    def test_dotenv_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text(
            "STARTUP_WAIT_HOST=from-dotenv\nLOG_LEVEL=WARNING\nUNRELATED_VAR=1\n"
        )

        config = Config()

        assert config.wait_target().host == "from-dotenv"
        assert config.log_level == "WARNING"

    def test_invalid_interval_rejected(self, clean_env):
        clean_env.setenv("STARTUP_WAIT_INTERVAL", "0")

        with pytest.raises(ValidationError):
            WaitConfig()

    def test_connect_timeout_env(self, clean_env):
        clean_env.setenv("STARTUP_CONNECT_TIMEOUT", "0.25")

        assert Config().wait.connect_timeout == 0.25

    def test_connect_timeout_prefixed_env(self, clean_env):
        clean_env.setenv("STARTUP_WAIT_CONNECT_TIMEOUT", "0.75")

        assert WaitConfig().connect_timeout == 0.75

    def test_negative_timeout_rejected(self, clean_env):
        clean_env.setenv("STARTUP_WAIT_TIMEOUT", "-1")

        with pytest.raises(ValidationError):
            WaitConfig()

    def test_zero_timeout_allowed(self, clean_env):
        clean_env.setenv("STARTUP_WAIT_TIMEOUT", "0")

        assert WaitConfig().timeout == 0.0


class TestWaitTarget:
    """Test resolution of the polled address"""

    def test_from_database_url(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgres://postgres:postgres@pg:5433/medusa-store")

        assert str(Config().wait_target()) == "pg:5433"

    def test_database_url_without_port(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgres://postgres@pg/medusa-store")

        assert str(Config().wait_target()) == "pg:5432"

    def test_explicit_host_wins_over_database_url(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgres://postgres@pg:5433/medusa-store")
        clean_env.setenv("STARTUP_WAIT_HOST", "proxy")

        assert str(Config().wait_target()) == "proxy:5433"

    def test_malformed_port_falls_back(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgres://postgres@pg:notaport/medusa-store")

        assert str(Config().wait_target()) == "pg:5432"


class TestGetConfig:
    """Test the cached accessor"""

    def test_cached(self):
        assert get_config() is get_config()

    def test_reset(self):
        first = get_config()
        reset_config()

        assert get_config() is not first
