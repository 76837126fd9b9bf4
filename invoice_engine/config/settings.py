"""
Configuration management for the invoice engine.
"""

from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from invoice_engine.models.invoice import PaymentTerms


class BillingEngineConfig(BaseSettings):
    """Configuration settings for the invoice engine."""

    # Company Configuration
    company_name: str = Field(default="Tribute Studio", alias="COMPANY_NAME")
    invoice_prefix: str = Field(default="T", alias="INVOICE_PREFIX")

    # Billing Defaults
    default_payment_terms: PaymentTerms = Field(
        default=PaymentTerms.DUE_ON_RECEIPT, alias="DEFAULT_PAYMENT_TERMS"
    )
    default_markup_percent: Decimal = Field(
        default=Decimal("20"), alias="DEFAULT_MARKUP_PERCENT"
    )

    # Data Locations
    ledger_snapshot_file: str = Field(
        default="ledger_snapshot.json", alias="LEDGER_SNAPSHOT_FILE"
    )
    output_dir: str = Field(default="invoices", alias="OUTPUT_DIR")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("invoice_prefix")
    @classmethod
    def validate_invoice_prefix(cls, v):
        """Ensure the invoice prefix is usable in an invoice number."""
        v = v.strip()
        if not v or "-" in v:
            raise ValueError("Invoice prefix must be non-empty and contain no '-'")
        return v

    @field_validator("default_payment_terms", mode="before")
    @classmethod
    def validate_payment_terms(cls, v):
        """Accept payment terms case-insensitively."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("default_markup_percent")
    @classmethod
    def validate_markup(cls, v):
        """Ensure the default markup is not negative."""
        if v < 0:
            raise ValueError("Default markup percent cannot be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()


def load_config(env_file: Optional[str] = None) -> BillingEngineConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return BillingEngineConfig()


# Global configuration instance
_config: Optional[BillingEngineConfig] = None


def get_config() -> BillingEngineConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> BillingEngineConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
