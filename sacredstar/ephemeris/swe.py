from __future__ import annotations

import importlib
import importlib.util
from typing import Any

from ..exceptions import EphemerisError

__all__ = ["swe", "has_swe"]

_swe_mod: Any | None = None


def _load_swe() -> Any:
    global _swe_mod
    if _swe_mod is None:
        try:
            _swe_mod = importlib.import_module("swisseph")
        except ImportError as exc:  # pragma: no cover - depends on environment
            raise EphemerisError(
                "Swiss Ephemeris not available. Install pyswisseph (package: 'pyswisseph')."
            ) from exc
    return _swe_mod


class _SweProxy:
    """Resolve :mod:`swisseph` attributes on first use."""

    def __call__(self) -> Any:
        return _load_swe()

    def __getattr__(self, item: str) -> Any:
        return getattr(_load_swe(), item)


swe = _SweProxy()


def has_swe() -> bool:
    if _swe_mod is not None:
        return True
    return importlib.util.find_spec("swisseph") is not None
