from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    weather_api_key: str = Field(default="", alias="WEATHER_API_KEY")
    temperature_url: str = Field(default="http://localhost:8181/", alias="TEMPERATURE_URL")
    viacep_base_url: str = Field(default="https://viacep.com.br", alias="VIACEP_BASE_URL")
    weather_base_url: str = Field(default="https://api.weatherapi.com", alias="WEATHER_BASE_URL")

    request_name_otel: str = Field(default="", alias="REQUEST_NAME_OTEL")
    request_timeout_seconds: float = Field(default=60.0, alias="REQUEST_TIMEOUT_SECONDS")
    http_client_timeout_seconds: float = Field(default=30.0, alias="HTTP_CLIENT_TIMEOUT_SECONDS")

    tracing_enabled: bool = Field(default=True, alias="TRACING_ENABLED")
    otel_service_name: str = Field(default="", alias="OTEL_SERVICE_NAME")
    otel_exporter_otlp_endpoint: str = Field(default="", alias="OTEL_EXPORTER_OTLP_ENDPOINT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
