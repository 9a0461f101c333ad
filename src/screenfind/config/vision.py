"""
Matching configuration knobs centralization.

Default thresholds, filter deltas, preprocessing kernels, artifact names and
environment toggles live here. The matcher, the CLI and the diagnostics
observer import from this module instead of hardcoding values.
"""
from __future__ import annotations

from typing import Tuple
import os

# Acceptance
DEFAULT_PRECISION: float = 0.9

# Result filter / suppression window half-extents (pixels)
DEFAULT_X_DELTA: int = 5
DEFAULT_Y_DELTA: int = 5

# Preprocessing
BLUR_KERNEL: Tuple[int, int] = (3, 3)

# Diagnostics
ANNOTATE_COLOR_BGR: Tuple[int, int, int] = (0, 0, 255)
ANNOTATE_THICKNESS: int = 2
SURFACE_ARTIFACT: str = "match_surface.png"
ANNOTATED_ARTIFACT: str = "match_annotated.png"

# Environment flags
PERF_ENABLED: bool = os.environ.get("SF_VISION_PERF", "0") == "1"
DEBUG_ARTIFACTS: bool = os.environ.get("SF_VISION_DEBUG", "0") == "1"

__all__ = [
    "DEFAULT_PRECISION",
    "DEFAULT_X_DELTA",
    "DEFAULT_Y_DELTA",
    "BLUR_KERNEL",
    "ANNOTATE_COLOR_BGR",
    "ANNOTATE_THICKNESS",
    "SURFACE_ARTIFACT",
    "ANNOTATED_ARTIFACT",
    "PERF_ENABLED",
    "DEBUG_ARTIFACTS",
]
