"""
Optional match diagnostics.

MatchObserver is the hook interface the matcher calls during one matching
call; the base class does nothing. ArtifactObserver writes a min-max
normalized image of the correlation surface and a copy of the searched target
with the top match outlined. Observer failures are logged by the matcher and
never change the returned results.

An observer instance keeps per-call state; pass a fresh one to each
concurrent match call.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple
import logging

import cv2
import numpy as np

from ..config.vision import (
    ANNOTATE_COLOR_BGR,
    ANNOTATE_THICKNESS,
    SURFACE_ARTIFACT,
    ANNOTATED_ARTIFACT,
)
from .preprocess import to_bgr
from .results import MatchCandidate, MatchResults

logger = logging.getLogger(__name__)


class MatchObserver:
    """No-op hooks; subclass and override what you need."""

    def begin(self, target: np.ndarray, template_size: Tuple[int, int], precision: float) -> None:
        pass

    def surface(self, surface: np.ndarray) -> None:
        pass

    def candidate(self, candidate: MatchCandidate, accepted: bool) -> None:
        pass

    def finish(self, results: MatchResults) -> None:
        pass


def normalize_surface(surface: np.ndarray) -> np.ndarray:
    """Scale a float surface into an 8-bit image (NORM_MINMAX)."""
    out = np.zeros(surface.shape[:2], dtype=np.uint8)
    cv2.normalize(surface, out, 0, 255, cv2.NORM_MINMAX, cv2.CV_8U)
    return out


class ArtifactObserver(MatchObserver):
    """Write the surface visualization and an annotated target to disk."""

    def __init__(self, surface_path: Optional[Path] = None, annotated_path: Optional[Path] = None) -> None:
        self.surface_path = Path(surface_path) if surface_path else None
        self.annotated_path = Path(annotated_path) if annotated_path else None
        self._target: Optional[np.ndarray] = None
        self._size: Tuple[int, int] = (0, 0)
        self._annotated = False

    @classmethod
    def in_dir(cls, out_dir: Path) -> "ArtifactObserver":
        out = Path(out_dir)
        return cls(out / SURFACE_ARTIFACT, out / ANNOTATED_ARTIFACT)

    def begin(self, target, template_size, precision) -> None:
        self._target = target
        self._size = (int(template_size[0]), int(template_size[1]))
        self._annotated = False

    def surface(self, surface) -> None:
        if self.surface_path is None:
            return
        self._write(self.surface_path, normalize_surface(surface))

    def candidate(self, candidate, accepted) -> None:
        # Only the first accepted candidate is the top match
        if not accepted or self._annotated or self.annotated_path is None or self._target is None:
            return
        annotated = to_bgr(self._target).copy()
        w, h = self._size
        cv2.rectangle(
            annotated,
            (candidate.left, candidate.top),
            (candidate.left + w - 1, candidate.top + h - 1),
            ANNOTATE_COLOR_BGR,
            ANNOTATE_THICKNESS,
        )
        self._write(self.annotated_path, annotated)
        self._annotated = True

    def finish(self, results) -> None:
        self._target = None

    @staticmethod
    def _write(path: Path, img: np.ndarray) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(path), img):
            raise OSError(f"cv2.imwrite failed for {path}")
        logger.debug("match: wrote artifact %s", path)
