from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Настройки robolang, загружаемые из переменных среды (префикс ROBOLANG_)."""

    log_level: str = Field("INFO")
    source_encoding: str = Field("utf-8")  # кодировка файлов программ
    sensor_default: int = Field(0)  # ответ LoggingRobot на любой датчик

    model_config = SettingsConfigDict(
        env_prefix="ROBOLANG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value


settings = Settings()
