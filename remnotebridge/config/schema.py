"""Configuration schema using Pydantic.

Persisted to ~/.remnote-bridge/config.json (camelCase keys on disk).
"""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BridgeConfig(BaseModel):
    """Local RemNote bridge listener."""
    host: str = "localhost"
    port: int = Field(default=3333, ge=1, le=65535)


class BatchConfig(BaseModel):
    """Batch policy."""
    continue_on_fail: bool = False  # Tolerant mode: failed items become {"error": ...} records


class LoggingConfig(BaseModel):
    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_enabled: bool = True


class Config(BaseSettings):
    """Root configuration for remnotebridge."""
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def bridge_url(self) -> str:
        return f"ws://{self.bridge.host}:{self.bridge.port}"

    model_config = SettingsConfigDict(
        env_prefix="REMNOTE_BRIDGE_",
        env_nested_delimiter="__",
    )
