"""Pytest configuration.

Ensures src/ is on sys.path so tests can import `screenfind.*` without an
editable install, and provides small synthetic images.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noise_patch(rng):
    """10x10 random grayscale patch; never zero so it stands out on black."""
    return rng.integers(1, 256, size=(10, 10), dtype=np.uint8)


def place(canvas: np.ndarray, patch: np.ndarray, left: int, top: int) -> np.ndarray:
    h, w = patch.shape[:2]
    canvas[top:top + h, left:left + w] = patch
    return canvas


@pytest.fixture
def scene(noise_patch):
    """100x100 uniform target with the noise patch at (20, 30)."""
    canvas = np.full((100, 100), 40, dtype=np.uint8)
    return place(canvas, noise_patch, 20, 30)
