"""
Pure image preprocessing for template and target buffers.

This module contains only stateless, side-effect-free functions.

Pipeline order: resize (template only) -> grayscale -> equalize -> blur.
Equalization counters illumination drift between template capture and screen
capture; the small blur suppresses the noise equalization amplifies. The
grayscale-only variant is available via PreprocessOptions.light().

preprocess() runs the whole pipeline on one buffer. The matcher instead
equalizes template and target with the target's lookup tables
(equalization_luts / apply_luts) so equal pixels stay equal in both.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import logging

import cv2
import numpy as np

from ..config.vision import BLUR_KERNEL
from ..core.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreprocessOptions:
    grayscale: bool = True
    equalize: bool = True
    blur: bool = True
    blur_kernel: Tuple[int, int] = BLUR_KERNEL

    @classmethod
    def light(cls) -> "PreprocessOptions":
        """Grayscale only: faster, less robust to lighting changes."""
        return cls(grayscale=True, equalize=False, blur=False)


def validate_buffer(img: np.ndarray, what: str = "image") -> np.ndarray:
    """Ensure img is a non-empty 8-bit buffer with 1, 3 or 4 channels."""
    if not isinstance(img, np.ndarray):
        raise InvalidConfiguration(f"{what}: expected numpy.ndarray, got {type(img).__name__}")
    if img.size == 0:
        raise InvalidConfiguration(f"{what}: empty buffer")
    if img.dtype != np.uint8:
        raise InvalidConfiguration(f"{what}: expected uint8 pixels, got {img.dtype}")
    if img.ndim == 2:
        return img
    if img.ndim == 3 and img.shape[2] in (1, 3, 4):
        if img.shape[2] == 1:
            return np.ascontiguousarray(img[:, :, 0])
        return img
    raise InvalidConfiguration(f"{what}: unsupported shape {img.shape}")


def resize_to_width(img: np.ndarray, width: int) -> np.ndarray:
    """Resize to the given width keeping aspect ratio.

    INTER_AREA when shrinking, INTER_LANCZOS4 when enlarging.
    """
    if width is None or int(width) <= 0:
        raise InvalidConfiguration(f"resize width must be > 0, got {width!r}")
    width = int(width)
    h, w = img.shape[:2]
    if width == w:
        return img
    new_h = max(1, int(round(h * width / float(w))))
    interp = cv2.INTER_AREA if width < w else cv2.INTER_LANCZOS4
    return cv2.resize(img, (width, new_h), interpolation=interp)


def to_gray(img: np.ndarray) -> np.ndarray:
    """Luma-weighted reduction to a single channel. Gray input passes through."""
    if img.ndim == 2:
        return img
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def to_bgr(img: np.ndarray) -> np.ndarray:
    """Normalize to 3-channel BGR so colour template and target have equal depth."""
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    return img


def equalize(img: np.ndarray) -> np.ndarray:
    """Global histogram equalization; per channel for colour buffers."""
    if img.ndim == 2:
        return cv2.equalizeHist(img)
    return cv2.merge([cv2.equalizeHist(c) for c in cv2.split(img)])


def _equalization_lut(channel: np.ndarray) -> np.ndarray:
    hist = np.bincount(channel.ravel(), minlength=256)
    first = int(np.flatnonzero(hist)[0])
    total = int(channel.size)
    if hist[first] == total:
        return np.arange(256, dtype=np.uint8)
    cdf = np.cumsum(hist) - hist[first]
    lut = np.rint(cdf * (255.0 / (total - hist[first])))
    return np.clip(lut, 0, 255).astype(np.uint8)


def equalization_luts(img: np.ndarray) -> Tuple[np.ndarray, ...]:
    """Lookup tables that equalize img's histogram, one per channel.

    Same mapping as cv2.equalizeHist, but reusable: applying the tables of one
    buffer to another keeps identical pixels identical across both.
    """
    channels = [img] if img.ndim == 2 else cv2.split(img)
    return tuple(_equalization_lut(c) for c in channels)


def apply_luts(img: np.ndarray, luts: Sequence[np.ndarray]) -> np.ndarray:
    """Remap img through per-channel tables from equalization_luts()."""
    depth = 1 if img.ndim == 2 else img.shape[2]
    if len(luts) != depth:
        raise InvalidConfiguration(f"expected {depth} lookup table(s), got {len(luts)}")
    if img.ndim == 2:
        return cv2.LUT(img, luts[0])
    return cv2.merge([cv2.LUT(c, lut) for c, lut in zip(cv2.split(img), luts)])


def denoise(img: np.ndarray, ksize: Tuple[int, int] = BLUR_KERNEL) -> np.ndarray:
    """Light Gaussian blur preserving structural edges."""
    kw, kh = int(ksize[0]), int(ksize[1])
    if kw <= 0 or kh <= 0 or kw % 2 == 0 or kh % 2 == 0:
        raise InvalidConfiguration(f"blur kernel must be positive and odd, got {ksize!r}")
    return cv2.GaussianBlur(img, (kw, kh), 0)


def blur_margin(ksize: Tuple[int, int], shape: Tuple[int, ...]) -> Tuple[int, int]:
    """(x, y) border of a blurred image whose pixels depend on what lies outside it.

    (0, 0) when the image is too small to keep an interior of at least 2x2.
    """
    mx, my = int(ksize[0]) // 2, int(ksize[1]) // 2
    h, w = shape[:2]
    if w - 2 * mx < 2 or h - 2 * my < 2:
        return 0, 0
    return mx, my


def preprocess(
    img: np.ndarray,
    options: Optional[PreprocessOptions] = None,
    resize_width: Optional[int] = None,
) -> np.ndarray:
    """Run the configured pipeline and return a new buffer ready for correlation."""
    opts = options or PreprocessOptions()
    out = validate_buffer(img)
    if resize_width is not None:
        out = resize_to_width(out, resize_width)
    out = to_gray(out) if opts.grayscale else to_bgr(out)
    if opts.equalize:
        out = equalize(out)
    if opts.blur:
        out = denoise(out, opts.blur_kernel)
    # Never hand back the caller's array
    if out is img or np.may_share_memory(out, img):
        out = out.copy()
    return out
