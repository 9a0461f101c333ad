"""Core subpackage.

- errors: typed failure taxonomy
- config: INI-backed ConfigManager
- logging_setup: session logging and artifact directories
"""
from .errors import (
    ScreenFindError,
    AssetNotFound,
    DecodeError,
    InvalidConfiguration,
    PrimitiveFailure,
)
from .config import ConfigManager

__all__ = [
    "ScreenFindError",
    "AssetNotFound",
    "DecodeError",
    "InvalidConfiguration",
    "PrimitiveFailure",
    "ConfigManager",
]
