"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .currency import Money


class BankConfig(BaseSettings):
    """Bharat Bank console configuration"""

    model_config = SettingsConfigDict(
        env_prefix="BHARAT_BANK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Branding
    bank_name: str = "Bharat Bank"
    ifsc_code: str = "BBNK0001234"

    # Account numbering
    account_number_prefix: str = "BB"
    account_number_start: int = 100000000001

    # Business rules configuration
    min_initial_deposit: Decimal = Decimal("500.00")  # Enforced by the console, not the account
    max_login_attempts: int = 3
    max_pin_attempts: int = 3

    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs go to stderr

    @property
    def min_initial_deposit_money(self) -> Money:
        """Minimum opening deposit as Money"""
        return Money(self.min_initial_deposit)


# Global configuration instance
config = BankConfig()


def get_config() -> BankConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankConfig:
    """Reload configuration from environment"""
    global config
    config = BankConfig()
    return config
