from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Venue Booking API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./venue_booking.db"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    DEFAULT_CURRENCY: str = "IDR"

    # Inclusive bounds on the length of a single booking
    MIN_BOOKING_HOURS: int = 1
    MAX_BOOKING_HOURS: int = 720


settings = Settings()
