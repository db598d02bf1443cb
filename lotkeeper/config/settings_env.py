from decimal import Decimal
from typing import Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Development
    DEV_MODE: bool = Field(default=True, description="Enable debug mode")

    # Parking Configuration
    TOTAL_SLOTS: Optional[int] = Field(default=None, gt=0, description="Number of parking slots, prompted when unset")
    HOURLY_RATE: Decimal = Field(default=Decimal("50"), ge=0, description="Hourly parking rate")
    CURRENCY_SYMBOL: str = Field(default="P", description="Prefix used when displaying money")
    SLOTS_PER_ROW: int = Field(default=10, gt=0, description="Slots per row in the lot map")

    # Storage
    STORAGE_BACKEND: Literal["text", "sqlite"] = Field(default="text", description="Where lot state is persisted")
    DATA_DIR: str = Field(default=".", description="Directory holding the text data files")
    DATABASE_URL: str = Field(default="sqlite:///./parking_lot.db", description="Database connection URL")


# Create settings instance
settings = Settings()
