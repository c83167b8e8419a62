"""
Database configuration settings.

PostgreSQL connection for the job and record store. POSTGRES_URL_OVERRIDE
replaces the composed URL entirely (tests point it at SQLite).

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Job/record store connection configuration
"""

from pydantic import Field
from sqlalchemy.engine import URL

from csv_processor.configs.base import BaseSettings, env_config


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = env_config("POSTGRES_")

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="csvprocessor", description="PostgreSQL database name")
    require_ssl: bool = Field(default=False, description="Require TLS to the server")

    pool_size: int = Field(default=5, description="Persistent pooled connections")
    max_overflow: int = Field(default=10, description="Extra connections under load")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    url_override: str | None = Field(
        default=None,
        description="Full async SQLAlchemy URL; replaces the composed URL when set",
    )

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the asyncpg driver (or the override)."""
        if self.url_override:
            return self.url_override
        url = URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.db,
            query={"ssl": "require"} if self.require_ssl else {},
        )
        return url.render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")
