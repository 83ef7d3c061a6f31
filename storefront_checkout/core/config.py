"""Checkout Service Configuration"""

from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Storefront Checkout"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8080

    # Remote services
    commerce_base_url: str = "http://localhost:8000"
    order_service_url: Optional[str] = None
    delivery_service_url: Optional[str] = None
    catalog_service_url: Optional[str] = None

    # Seconds per remote call; a timeout counts as a transport failure
    request_timeout: float = 30.0

    # Checkout
    reject_past_schedule: bool = True

    @property
    def order_base_url(self) -> str:
        return self.order_service_url or self.commerce_base_url

    @property
    def delivery_base_url(self) -> str:
        return self.delivery_service_url or self.commerce_base_url

    @property
    def catalog_base_url(self) -> str:
        return self.catalog_service_url or self.commerce_base_url


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
