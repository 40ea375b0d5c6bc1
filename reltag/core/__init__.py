"""Core types: results, exit codes and configuration."""

from .config import ConfigError, TaggerConfig, load_config, resolve_config_path
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "TaggerConfig",
    "load_config",
    "resolve_config_path",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
