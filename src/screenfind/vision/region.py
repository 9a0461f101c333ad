"""
Search-area restriction and rectangle clamping.

Coordinates reported for a cropped search are relative to the crop's own
origin. Use MatchRegion.to_absolute to translate them back into the
uncropped target (or screen) space.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

import numpy as np

from ..core.errors import InvalidConfiguration


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class MatchRegion:
    left: int
    top: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise InvalidConfiguration(f"region width must be > 0, got {self.width}")
        if self.height <= 0:
            raise InvalidConfiguration(f"region height must be > 0, got {self.height}")
        if self.left < 0 or self.top < 0:
            raise InvalidConfiguration(f"region origin must be >= 0, got ({self.left}, {self.top})")

    @classmethod
    def parse(cls, text: str) -> "MatchRegion":
        """Parse "left,top,width,height" (the config.ini / CLI form)."""
        parts = [p.strip() for p in str(text or "").split(",")]
        if len(parts) != 4:
            raise InvalidConfiguration(f"region must be 'left,top,width,height', got {text!r}")
        try:
            left, top, width, height = (int(p) for p in parts)
        except ValueError as e:
            raise InvalidConfiguration(f"region values must be integers, got {text!r}") from e
        return cls(left, top, width, height)

    def as_mss(self) -> dict:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}

    def to_absolute(self, result) -> Tuple[int, int]:
        """Translate a crop-relative match (anything with left/top) into outer coordinates."""
        return self.left + int(result.left), self.top + int(result.top)


def crop(img: np.ndarray, region: Optional[MatchRegion]) -> np.ndarray:
    """Return a copy of the region of img; the image itself when region is None."""
    if region is None:
        return img
    h, w = img.shape[:2]
    if region.left + region.width > w or region.top + region.height > h:
        raise InvalidConfiguration(
            f"region {region.left},{region.top},{region.width},{region.height} exceeds image {w}x{h}"
        )
    return img[region.top:region.top + region.height, region.left:region.left + region.width].copy()


def clamp_rect(rect: Rect, bounds: Tuple[int, int]) -> Rect:
    """Clamp rect into bounds=(cols, rows); the result is never smaller than 1x1."""
    cols, rows = int(bounds[0]), int(bounds[1])
    x = max(0, min(int(rect.x), cols - 1))
    y = max(0, min(int(rect.y), rows - 1))
    w = min(max(int(rect.width), 1), cols - x)
    h = min(max(int(rect.height), 1), rows - y)
    return Rect(x, y, w, h)
