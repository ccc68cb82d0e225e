"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .currency import Currency


class LedgerConfig(BaseSettings):
    """Ledger service configuration"""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_workers: int = 1

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Business rules configuration
    default_currency: str = "USD"

    # Feature flags
    enable_audit_logging: bool = True

    @field_validator("default_currency")
    @classmethod
    def _check_default_currency(cls, value: str) -> str:
        return Currency.from_code(value).code

    @field_validator("api_workers")
    @classmethod
    def _check_api_workers(cls, value: int) -> int:
        if value != 1:
            raise ValueError("api_workers must be 1: ledger state lives in a single process")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value

    @property
    def default_currency_enum(self) -> Currency:
        return Currency[self.default_currency]


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
