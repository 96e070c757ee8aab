"""Register Service Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Paradise POS Register"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8002

    # Transactions backend. When unset the register runs local-only and
    # transactions are kept in the in-process journal.
    transactions_api_url: Optional[str] = None
    transactions_api_token: Optional[str] = None
    transaction_save_timeout: float = 10.0

    # Pricing
    default_tax_rate: float = 0.0

    # Store identity stamped on every transaction
    store_name: str = "Paradise POS"
    tenant_id: str = "TENANT001"
    default_cashier_id: str = "CASH001"
    default_cashier_name: str = "Current User"

    # Sessions
    session_max_age_hours: int = 24

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "POS_"
        case_sensitive = False

    @property
    def backend_configured(self) -> bool:
        """Check if a transactions backend is configured"""
        return bool(self.transactions_api_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
