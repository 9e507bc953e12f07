"""Configuration module for whisperbox."""

from whisperbox.config.loader import clear_config_cache, get_config, get_config_path, load_config, save_config
from whisperbox.config.schema import WhisperBoxConfig, RpcConfig, ReaderConfig, LoggingConfig

__all__ = [
    "WhisperBoxConfig",
    "RpcConfig",
    "ReaderConfig",
    "LoggingConfig",
    "load_config",
    "save_config",
    "get_config_path",
    "get_config",
    "clear_config_cache",
]
