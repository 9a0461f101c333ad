"""Config subpackage.

- vision: central knobs for matching thresholds, deltas, kernels and toggles
"""
from .vision import (
    DEFAULT_PRECISION,
    DEFAULT_X_DELTA,
    DEFAULT_Y_DELTA,
    BLUR_KERNEL,
    ANNOTATE_COLOR_BGR,
    ANNOTATE_THICKNESS,
    SURFACE_ARTIFACT,
    ANNOTATED_ARTIFACT,
    PERF_ENABLED,
    DEBUG_ARTIFACTS,
)

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
