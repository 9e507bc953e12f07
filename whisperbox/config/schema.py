"""Configuration schema using Pydantic.

Persisted to ~/.whisperbox/config.json; environment variables use the
WHISPERBOX_ prefix with ``__`` between nested keys (WHISPERBOX_RPC__URL) and
override values read from the file.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class RpcConfig(BaseModel):
    """Whisper node endpoint."""
    url: str = "http://127.0.0.1:8545"
    request_timeout_seconds: float = Field(default=180.0, gt=0)  # Ceiling for a single HTTP call


class ReaderConfig(BaseModel):
    """Defaults for the poll loop."""
    topics: list[str] = Field(default_factory=list)
    poll_interval_seconds: float = Field(default=1.0, gt=0)
    read_timeout_seconds: int = Field(default=-1, ge=-1)  # -1 blocks until messages arrive


class LoggingConfig(BaseModel):
    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_to_file: bool = False


class WhisperBoxConfig(BaseSettings):
    """Root configuration for whisperbox."""
    rpc: RpcConfig = Field(default_factory=RpcConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="WHISPERBOX_",
        env_nested_delimiter="__"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats values passed in from the config file.
        return env_settings, init_settings, dotenv_settings, file_secret_settings
