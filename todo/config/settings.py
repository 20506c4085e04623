"""Application settings using Pydantic Settings."""

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

# Validation constants
PORT_MIN = 1
PORT_MAX = 65535
POOL_TIMEOUT_MIN = 1  # Minimum 1 second
POOL_TIMEOUT_MAX = 300  # Maximum 5 minutes
STATEMENT_TIMEOUT_MIN = 1000  # Minimum 1 second (in ms)
STATEMENT_TIMEOUT_MAX = 300000  # Maximum 5 minutes (in ms)
REDIRECT_STATUSES = frozenset({301, 302, 303})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "todo-list"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP server
    server_host: str = "0.0.0.0"
    server_port: int = 3000

    # Database connection, either as components or as a full URL
    database_driver: str = "postgresql+psycopg"
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: SecretStr = SecretStr("")
    database_name: str = "todo"
    database_url: str | None = None

    # Database pool
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_echo: bool = False

    # Database timeouts
    database_pool_timeout: int = 30  # Connection pool timeout in seconds
    database_statement_timeout: int = 30000  # Statement timeout in milliseconds

    # Status used when redirecting back to the list after a save.
    # 303 is the POST-redirect-GET status; 301 matches older deployments.
    save_redirect_status: int = 303

    # Request size limits
    max_request_size: int = 10 * 1024 * 1024  # 10MB default

    # Timing/debug headers
    expose_timing_header: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            msg = f"Invalid log level: {v}. Must be one of {valid_levels}"
            raise ValueError(msg)
        return upper_v

    @field_validator("server_port", "database_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate a TCP port number."""
        if not PORT_MIN <= v <= PORT_MAX:
            msg = f"Port must be between {PORT_MIN} and {PORT_MAX}, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("database_pool_timeout")
    @classmethod
    def validate_pool_timeout(cls, v: int) -> int:
        """Validate database pool timeout is within reasonable bounds."""
        if v < POOL_TIMEOUT_MIN:
            msg = f"database_pool_timeout must be at least {POOL_TIMEOUT_MIN} second"
            raise ValueError(msg)
        if v > POOL_TIMEOUT_MAX:
            msg = f"database_pool_timeout must be at most {POOL_TIMEOUT_MAX} seconds"
            raise ValueError(msg)
        return v

    @field_validator("database_statement_timeout")
    @classmethod
    def validate_statement_timeout(cls, v: int) -> int:
        """Validate database statement timeout is within reasonable bounds."""
        if v < STATEMENT_TIMEOUT_MIN:
            msg = f"database_statement_timeout must be at least {STATEMENT_TIMEOUT_MIN}ms (1 second)"
            raise ValueError(msg)
        if v > STATEMENT_TIMEOUT_MAX:
            msg = f"database_statement_timeout must be at most {STATEMENT_TIMEOUT_MAX}ms (5 minutes)"
            raise ValueError(msg)
        return v

    @field_validator("save_redirect_status")
    @classmethod
    def validate_redirect_status(cls, v: int) -> int:
        """Only redirect statuses that turn the follow-up request into a GET."""
        if v not in REDIRECT_STATUSES:
            msg = f"save_redirect_status must be one of {sorted(REDIRECT_STATUSES)}"
            raise ValueError(msg)
        return v

    @property
    def async_database_url(self) -> str:
        """Get the async database URL.

        A configured ``database_url`` wins over the individual components.
        Plain ``postgresql://`` URLs are switched to the psycopg3 driver.
        """
        if self.database_url:
            url = self.database_url
            if url.startswith("postgresql://"):
                return url.replace("postgresql://", "postgresql+psycopg://", 1)
            if url.startswith("postgres://"):
                return url.replace("postgres://", "postgresql+psycopg://", 1)
            return url

        return URL.create(
            self.database_driver,
            username=self.database_user,
            password=self.database_password.get_secret_value() or None,
            host=self.database_host,
            port=self.database_port,
            database=self.database_name,
        ).render_as_string(hide_password=False)

    @property
    def database_dialect(self) -> str:
        """Backend name of the configured database (postgresql, sqlite, ...)."""
        return make_url(self.async_database_url).get_backend_name()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
