"""
Configuration management for the inventory ledger.

Uses Pydantic Settings for environment variable validation and type safety.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class LedgerConfig(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    db_path: Optional[str] = Field(
        default=None,
        description="SQLite database path (in-memory storage when unset)"
    )
    max_quantity: int = Field(
        default=10_000,
        gt=0,
        description="Initial quantity bound, used only if none is persisted"
    )
    max_price: int = Field(
        default=1_000_000_000,
        gt=0,
        description="Initial price bound, used only if none is persisted"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="HTTP API bind address"
    )
    api_port: int = Field(
        default=8000,
        description="HTTP API port"
    )
    caller_header: str = Field(
        default="X-Caller",
        description="Request header carrying the verified caller principal"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    class Config:
        env_prefix = "LEDGER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global config instance
_config: Optional[LedgerConfig] = None


def get_config() -> LedgerConfig:
    """
    Get the global configuration instance.
    
    Lazily loads configuration on first access.
    
    Returns:
        LedgerConfig: The global configuration instance
    """
    global _config
    if _config is None:
        _config = LedgerConfig()
    return _config


def reload_config() -> LedgerConfig:
    """
    Reload configuration from environment variables.
    
    Useful for testing or when environment changes.
    
    Returns:
        LedgerConfig: The reloaded configuration instance
    """
    global _config
    _config = None
    return get_config()
