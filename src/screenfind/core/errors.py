"""Typed failures raised by the matching engine and its collaborators.

Geometric impossibility (template larger than the target) is deliberately
absent: it yields an empty result set, not an exception.
"""
from __future__ import annotations


class ScreenFindError(Exception):
    """Base class for all ScreenFind failures."""


class AssetNotFound(ScreenFindError, LookupError):
    """A named template or target asset is missing from the asset store."""

    def __init__(self, name: str) -> None:
        super().__init__(f"asset not found: {name}")
        self.name = name


class DecodeError(ScreenFindError):
    """Raster bytes could not be decoded into an image buffer."""

    def __init__(self, cause: object) -> None:
        super().__init__(f"failed to decode image: {cause}")
        self.cause = cause


class InvalidConfiguration(ScreenFindError, ValueError):
    """Rejected matcher, region, filter or buffer configuration."""


class PrimitiveFailure(ScreenFindError):
    """The correlation primitive failed while computing the surface."""

    def __init__(self, cause: object) -> None:
        super().__init__(f"correlation failed: {cause}")
        self.cause = cause


__all__ = [
    "ScreenFindError",
    "AssetNotFound",
    "DecodeError",
    "InvalidConfiguration",
    "PrimitiveFailure",
]
