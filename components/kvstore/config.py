from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class KVStoreSettings(BaseSettings):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO")  # DEBUG | INFO | WARNING | ERROR
    log_json: bool = Field(default=True)

    class Config:
        env_prefix = "KVSTORE_"
        env_file = ".env"
        case_sensitive = False
