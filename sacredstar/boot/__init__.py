"""Process bootstrap helpers."""

from .logging import LEVEL_ENV_VARS, configure_logging, resolve_level

__all__ = ["LEVEL_ENV_VARS", "configure_logging", "resolve_level"]
