"""Configuration management for the container entrypoint.

Uses Pydantic Settings for environment-based configuration. Every value can
be overridden from the container environment or an optional `.env` file.
"""

from typing import Optional
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.models import WaitTarget

DEFAULT_WAIT_HOST = "postgres"
DEFAULT_WAIT_PORT = 5432


class WaitConfig(BaseSettings):
    """Dependency wait configuration."""

    host: Optional[str] = Field(default=None, description="Host to poll (defaults to DATABASE_URL host)")
    port: Optional[int] = Field(default=None, description="Port to poll (defaults to DATABASE_URL port)", gt=0, lt=65536)
    interval: float = Field(default=2.0, description="Seconds between connection attempts", gt=0)
    connect_timeout: float = Field(
        default=2.0,
        description="Per-attempt connect timeout",
        gt=0,
        validation_alias=AliasChoices("STARTUP_CONNECT_TIMEOUT", "STARTUP_WAIT_CONNECT_TIMEOUT"),
    )
    timeout: Optional[float] = Field(default=None, description="Overall deadline; unset waits forever", ge=0)

    model_config = SettingsConfigDict(
        env_prefix="STARTUP_WAIT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


class CommandsConfig(BaseSettings):
    """Commands run by the startup pipeline."""

    build_command: str = Field(default="npm run build", description="Build step (fatal)")
    migrate_command: str = Field(default="npx medusa db:migrate", description="Migration step")
    sync_links_command: str = Field(default="npx medusa db:sync-links", description="Link sync step")
    seed_command: str = Field(
        default="npx medusa exec ./src/scripts/seed.ts", description="Seed step"
    )
    server_command: str = Field(default="npm run start", description="Server process")
    skip_seed: bool = Field(default=False, description="Do not run the seed step")
    workdir: str = Field(default="/server", description="Working directory for every command")

    model_config = SettingsConfigDict(
        env_prefix="STARTUP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


class Config(BaseSettings):
    """Main entrypoint configuration."""

    # Sub-configurations
    wait: WaitConfig = Field(default_factory=WaitConfig)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)

    # Passed through to the application, only read here to find the database
    database_url: Optional[str] = Field(default=None, description="Postgres connection string")

    # Service configuration
    service_name: str = Field(default="medusa-entrypoint", description="Service name")
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=True, description="Render logs as JSON")
    metrics_textfile: Optional[str] = Field(
        default=None, description="Write startup metrics to this file before exec or on abort"
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def wait_target(self) -> WaitTarget:
        """Resolve the address polled before startup.

        Explicit STARTUP_WAIT_HOST/PORT win, then the DATABASE_URL host and
        port, then postgres:5432.
        """
        url_host: Optional[str] = None
        url_port: Optional[int] = None
        if self.database_url:
            parts = urlsplit(self.database_url)
            url_host = parts.hostname
            try:
                url_port = parts.port
            except ValueError:
                url_port = None

        host = self.wait.host or url_host or DEFAULT_WAIT_HOST
        port = self.wait.port or url_port or DEFAULT_WAIT_PORT
        return WaitTarget(host=host, port=port)


# Global config instance
_config_instance: Config | None = None


def get_config() -> Config:
    """Get or create configuration instance.

    Returns:
        Config instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None
