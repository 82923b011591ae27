from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="Boutique Billing Service")
    cors_origins: List[AnyHttpUrl] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )
    store_base_url: AnyHttpUrl | None = Field(
        default=None
    )
    store_timeout: float = Field(
        default=10.0
    )
    store_token: str | None = Field(
        default=None
    )
    use_mock_data: bool = Field(
        default=True
    )

    bill_id_prefix: str = Field(default="BILL")
    bill_id_offset: int = Field(default=1000)
    default_due_days: int = Field(default=7)

    payee_handle: str = Field(default="swethascouture@paytm")
    payee_display_name: str = Field(default="Swetha's Couture")
    currency: str = Field(default="INR")
    qr_box_size: int = Field(default=10)
    qr_border: int = Field(default=2)

    bank_account_name: str = Field(default="Swetha's Couture")
    bank_account_number: str = Field(default="")
    bank_ifsc: str = Field(default="")
    bank_name: str = Field(default="")

    model_config = SettingsConfigDict(env_prefix="BOUTIQUE_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
