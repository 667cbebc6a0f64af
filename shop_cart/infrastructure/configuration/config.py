"""
Configuration management for the shop cart
"""


import threading
from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shop_cart.infrastructure.utilities.constants import (
    BusinessSettings,
    StorageSettings,
    SyncSettings,
    ValidationSettings,
)


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Application settings
    environment: str = Field("development")
    log_level: str = Field("INFO")
    log_dir: str = Field("logs")

    # Storage configuration
    database_url: str = Field(StorageSettings.DEFAULT_DATABASE_URL)
    storage_dir: str = Field(StorageSettings.DEFAULT_STORAGE_DIR)
    guest_cart_storage_key: str = Field(StorageSettings.GUEST_CART_STORAGE_KEY)

    # Pricing rules
    gst_rate: Decimal = Field(BusinessSettings.GST_RATE)
    min_order_for_free_shipping: Decimal = Field(
        BusinessSettings.MIN_ORDER_FOR_FREE_SHIPPING
    )
    flat_shipping_fee: Decimal = Field(BusinessSettings.FLAT_SHIPPING_FEE)

    # Cart behaviour
    max_quantity_per_item: int = Field(ValidationSettings.MAX_QUANTITY_PER_ITEM)
    sync_debounce_seconds: float = Field(SyncSettings.SYNC_DEBOUNCE_SECONDS)
    merge_guest_cart_on_login: bool = Field(True)

    @field_validator("gst_rate", "min_order_for_free_shipping", "flat_shipping_fee")
    @classmethod
    def _non_negative(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError("Pricing values cannot be negative")
        return value

    @field_validator("max_quantity_per_item")
    @classmethod
    def _positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_quantity_per_item must be positive")
        return value

    @field_validator("sync_debounce_seconds")
    @classmethod
    def _positive_debounce(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("sync_debounce_seconds must be positive")
        return value


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
