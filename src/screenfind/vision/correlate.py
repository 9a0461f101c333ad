"""
Normalized cross-correlation boundary.

The numerics belong to OpenCV (TM_CCOEFF_NORMED); this module enforces the
input contract and maps OpenCV failures onto PrimitiveFailure.
"""
from __future__ import annotations

import cv2
import numpy as np

from ..core.errors import InvalidConfiguration, PrimitiveFailure

# Lowest normalized score; substituted for non-finite values
FLOOR_SCORE = -1.0


def fits(target: np.ndarray, template: np.ndarray) -> bool:
    """True if template can be placed at least once inside target."""
    th, tw = template.shape[:2]
    H, W = target.shape[:2]
    return W >= tw and H >= th


def correlate(target: np.ndarray, template: np.ndarray) -> np.ndarray:
    """Return a float32 surface of shape (H - th + 1, W - tw + 1)."""
    if target.ndim != template.ndim or target.shape[2:] != template.shape[2:]:
        raise InvalidConfiguration(
            f"channel depth differs: target {target.shape}, template {template.shape}"
        )
    if not fits(target, template):
        raise InvalidConfiguration(
            f"template {template.shape[1]}x{template.shape[0]} larger than "
            f"target {target.shape[1]}x{target.shape[0]}"
        )
    try:
        surface = cv2.matchTemplate(target, template, cv2.TM_CCOEFF_NORMED)
    except cv2.error as e:
        raise PrimitiveFailure(e) from e
    surface = np.asarray(surface, dtype=np.float32)
    np.nan_to_num(surface, copy=False, nan=FLOOR_SCORE, posinf=FLOOR_SCORE, neginf=FLOOR_SCORE)
    return surface
