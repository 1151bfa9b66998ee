from enum import Enum
from typing import Optional
from pydantic import AnyHttpUrl, BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    store_api_url: AnyHttpUrl = "https://api.teamgames.io/api/v3/store/transaction/update"
    store_secret_key: str = "default-key"
    claim_command: str = "tgclaim"
    secret_command: str = "tgsecret"
    request_timeout_seconds: float = 10.0
    log_level: str = "INFO"

settings = Settings()

class CommandType(str, Enum):
    CLAIM = "claim"
    SECRET = "secret"


class StoreConfig(BaseModel):
    """
    Runtime values a claim pass reads. Admin commands replace the whole value.
    """
    model_config = ConfigDict(frozen=True)

    api_key: str
    claim_command: str
    secret_command: str

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "StoreConfig":
        source = source or settings
        return cls(
            api_key=source.store_secret_key,
            claim_command=source.claim_command,
            secret_command=source.secret_command,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {
            "X-API-Key": self.api_key,
            "Content-Type": "application/json",
        }
