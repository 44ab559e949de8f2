from __future__ import annotations
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    api_key: str = Field(default="", alias="KRAKEN_API_KEY")
    # base64 text as shown by the exchange; decoded once by the client
    api_secret: str = Field(default="", alias="KRAKEN_API_SECRET", repr=False)

    base_url: str = Field(default="https://api.kraken.com", alias="KRAKEN_BASE_URL")
    user_agent: str = Field(default="kraken-spot-rest", alias="KRAKEN_USER_AGENT")

    # Transport (seconds / attempts); retries apply to GET only
    timeout: float = Field(default=10.0, alias="KRAKEN_TIMEOUT")
    max_retries: int = Field(default=3, alias="KRAKEN_MAX_RETRIES")
    retry_backoff: float = Field(default=0.5, alias="KRAKEN_RETRY_BACKOFF")

    # millis | hf
    nonce_generator: str = Field(default="millis", alias="KRAKEN_NONCE_GENERATOR")

    log_level: str = Field(default="INFO", alias="KRAKEN_LOG_LEVEL")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()  # load at import
