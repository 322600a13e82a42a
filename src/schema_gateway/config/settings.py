"""Runtime settings for the gateway, read from the environment.

A ``.env`` file in the working directory is honoured through python-dotenv;
real environment variables always win over values in the file.
"""

from dataclasses import dataclass, field
from typing import List
from urllib.parse import quote

from dotenv import load_dotenv

from schema_gateway.config.env import get_env_bool, get_env_int, get_env_list, get_env_str


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection parameters for the target Postgres database."""

    user: str = "postgres"
    host: str = "localhost"
    name: str = "monaco_db"
    password: str = ""
    port: int = 5432
    pool_min_size: int = 0
    pool_max_size: int = 10

    @property
    def dsn(self) -> str:
        """Build an asyncpg-compatible connection string."""
        credentials = quote(self.user, safe="")
        if self.password:
            credentials += ":" + quote(self.password, safe="")
        return f"postgresql://{credentials}@{self.host}:{self.port}/{self.name}"

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Read ``DB_*`` variables, falling back to the defaults above."""
        defaults = cls()
        return cls(
            user=get_env_str("DB_USER", defaults.user),
            host=get_env_str("DB_HOST", defaults.host),
            name=get_env_str("DB_NAME", defaults.name),
            password=get_env_str("DB_PASS", defaults.password),
            port=get_env_int("DB_PORT", defaults.port),
            pool_min_size=get_env_int("DB_POOL_MIN_SIZE", defaults.pool_min_size),
            pool_max_size=get_env_int("DB_POOL_MAX_SIZE", defaults.pool_max_size),
        )


@dataclass(frozen=True)
class GatewaySettings:
    """HTTP server settings plus the database they front."""

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    trace_queries: bool = False
    database: DatabaseSettings = field(default_factory=DatabaseSettings)

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "GatewaySettings":
        """Build settings from the process environment."""
        if load_dotenv_file:
            load_dotenv()
        defaults = cls()
        return cls(
            host=get_env_str("HOST", defaults.host),
            port=get_env_int("PORT", defaults.port),
            log_level=get_env_str("LOG_LEVEL", defaults.log_level).upper(),
            cors_allow_origins=get_env_list("CORS_ALLOW_ORIGINS", defaults.cors_allow_origins),
            trace_queries=get_env_bool("GATEWAY_TRACE_QUERIES", defaults.trace_queries),
            database=DatabaseSettings.from_env(),
        )
