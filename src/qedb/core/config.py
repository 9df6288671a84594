"""Configuration management for QEDB."""

import os
from dataclasses import dataclass, field
from urllib.parse import quote

DRIVER_SCHEME = "postgresql+psycopg"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class PostgresConfig:
    """Connection parameters used when DATABASE_URL is not set."""

    user: str = "appuser"
    password: str = ""
    host: str = "localhost"
    port: int = 5000
    database: str = "myapp"

    def to_url(self) -> str:
        """Assemble a SQLAlchemy URL from the individual parameters."""
        auth = quote(self.user, safe="")
        if self.password:
            auth += ":" + quote(self.password, safe="")
        return f"{DRIVER_SCHEME}://{auth}@{self.host}:{self.port}/{self.database}"


def normalize_url(url: str) -> str:
    """Point bare PostgreSQL URLs at the psycopg driver.

    URLs that already name a driver (or another dialect, e.g. sqlite) are
    returned unchanged.
    """
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return f"{DRIVER_SCHEME}://" + url[len(prefix):]
    return url


@dataclass
class Config:
    """Main application configuration."""

    database_url: str = ""
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    atomic: bool = False
    log_level: str = "INFO"
    connect_timeout: float = 10.0

    @property
    def url(self) -> str:
        """Effective database URL."""
        if self.database_url:
            return normalize_url(self.database_url)
        return self.postgres.to_url()

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        if url := os.environ.get("DATABASE_URL"):
            config.database_url = url

        if user := os.environ.get("POSTGRES_USER"):
            config.postgres.user = user
        if password := os.environ.get("POSTGRES_PASSWORD"):
            config.postgres.password = password
        if host := os.environ.get("POSTGRES_HOST"):
            config.postgres.host = host
        if port := os.environ.get("POSTGRES_PORT"):
            config.postgres.port = int(port)
        if database := os.environ.get("POSTGRES_DB"):
            config.postgres.database = database

        if atomic := os.environ.get("QEDB_ATOMIC"):
            config.atomic = atomic.strip().lower() in _TRUTHY

        if level := os.environ.get("QEDB_LOG_LEVEL"):
            config.log_level = level.upper()

        if timeout := os.environ.get("QEDB_CONNECT_TIMEOUT"):
            config.connect_timeout = float(timeout)

        return config
