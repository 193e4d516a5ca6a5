from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Salon Booking"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    BOOKING_DATA_PATH: str = "./data/bookings.json"

    SLOT_INTERVAL_MINUTES: int = 30
    CANCELLATION_WINDOW_HOURS: float = 2.0
    NOTES_MAX_LENGTH: int = 500

    NOTIFY_WEBHOOK_URL: str | None = None
    NOTIFY_TIMEOUT_SECONDS: float = 5.0


settings = Settings()
