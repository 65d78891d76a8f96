from typing import Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BYBIT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_key: str = Field(default="", description="API key for private endpoints")
    api_secret: SecretStr = Field(default=SecretStr(""), description="API secret used for request signing")

    testnet: bool = Field(default=True, description="Use api-testnet.bybit.com instead of mainnet")
    base_url: Optional[str] = Field(default=None, description="Override the REST base URL")

    recv_window: int = Field(default=5000, description="Signed request validity window in milliseconds")
    timeout_sec: float = Field(default=10.0, description="Default per-request timeout in seconds")
    max_retries: int = Field(default=3, description="Attempts for GET requests")
    retry_delay_ms: int = Field(default=100, description="Base delay between GET retries")

    log_level: str = Field(default="INFO", description="Log level for applications using the client")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
