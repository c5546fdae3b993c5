from .loader import (
    UnselfConfig,
    ConflictPolicy,
    ParseErrorPolicy,
    ConfigError,
    load_config_from_path,
)

__all__ = [
    "UnselfConfig",
    "ConflictPolicy",
    "ParseErrorPolicy",
    "ConfigError",
    "load_config_from_path",
]
