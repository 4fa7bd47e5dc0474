from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICEMATH_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Caps on a single `d` operation, so one request can't ask for a billion dice.
    max_dice: int = 100
    max_sides: int = 1000

    log_level: str = "INFO"


settings = Settings()
