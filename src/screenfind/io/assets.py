"""Named image assets and raster decoding.

AssetStore maps asset names (e.g. "button.png") to files under one root
directory. decode_image turns PNG/JPEG bytes into a BGR buffer.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Union
import logging

import cv2
import numpy as np

from ..core.errors import AssetNotFound, DecodeError

logger = logging.getLogger(__name__)


class AssetStore:
    """Directory-backed asset lookup."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).resolve()

    def path(self, name: str) -> Path:
        candidate = (self.root / name).resolve()
        # Names must stay inside the root
        if candidate != self.root and self.root not in candidate.parents:
            raise AssetNotFound(name)
        if not candidate.is_file():
            raise AssetNotFound(name)
        return candidate

    def get(self, name: str) -> bytes:
        p = self.path(name)
        try:
            return p.read_bytes()
        except OSError as e:
            logger.debug("assets: read failed for %s: %s", p, e)
            raise AssetNotFound(name) from e

    def names(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.relative_to(self.root).as_posix() for p in self.root.rglob("*.png") if p.is_file())


def decode_image(data: bytes) -> np.ndarray:
    """Decode raster bytes into a BGR uint8 buffer."""
    if not data:
        raise DecodeError("empty data")
    try:
        img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise DecodeError(e) from e
    if img is None or img.size == 0:
        raise DecodeError("unrecognized or corrupt raster data")
    return img


def load_image(store: AssetStore, name: str) -> np.ndarray:
    try:
        return decode_image(store.get(name))
    except DecodeError:
        logger.debug("assets: %s could not be decoded", name)
        raise
