from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = "INFO"

    # Fixed seed for reproducible sessions; unset means OS-backed randomness.
    seed: int | None = None

    # Request limits, checked before anything is rolled.
    max_dice: int = 1000
    max_expressions: int = 100
    max_terms: int = 100


settings = Settings()
