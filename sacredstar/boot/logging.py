"""Logging setup shared by the SacredStar command line."""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["LEVEL_ENV_VARS", "configure_logging", "resolve_level"]

LEVEL_ENV_VARS = ("SACREDSTAR_LOG_LEVEL", "LOG_LEVEL")

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _parse_level(value: str | int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.isdigit():
        return int(text)
    if text:
        named = logging.getLevelName(text.upper())
        if isinstance(named, int):
            return named
    return None


def resolve_level(
    value: str | int | None = None,
    *,
    default: str | int | None = None,
    verbose: int = 0,
) -> int:
    """Turn a level name, number or ``None`` into a numeric level.

    Precedence is ``value``, then the first of :data:`LEVEL_ENV_VARS` that is
    set, then ``default`` (typically the configured level), then ``INFO``.
    Unknown names fall through to the next source. Each ``verbose`` step
    lowers the result by ten, never below ``DEBUG``.
    """

    candidates = [value]
    candidates.extend(os.environ.get(name) or None for name in LEVEL_ENV_VARS)
    candidates.append(default)

    level = logging.INFO
    for candidate in candidates:
        parsed = _parse_level(candidate)
        if parsed is not None:
            level = parsed
            break

    if verbose > 0:
        level = max(logging.DEBUG, level - 10 * verbose)
    return level


def configure_logging(
    *,
    level: str | int | None = None,
    default: str | int | None = None,
    verbose: int = 0,
    **kwargs: Any,
) -> int:
    """Install the root handler and return the level applied.

    Extra keyword arguments go straight to :func:`logging.basicConfig`.
    """

    effective = resolve_level(level, default=default, verbose=verbose)
    kwargs.setdefault("format", _FORMAT)
    kwargs.setdefault("datefmt", _DATEFMT)
    kwargs.setdefault("force", True)
    logging.basicConfig(level=effective, **kwargs)
    logging.getLogger("sacredstar").debug(
        "logging configured at %s", logging.getLevelName(effective)
    )
    return effective
