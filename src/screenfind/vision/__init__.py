"""Vision package: pure image ops and the template matching engine.

Submodules:
- preprocess: stateless resize / grayscale / equalize / blur pipeline
- region: search-area cropping and rectangle clamping
- correlate: normalized cross-correlation boundary (OpenCV)
- results: match value types and the deduplication filter
- peaks: greedy peak extraction with suppression
- diagnostics: optional observers (artifact dumps)
- matcher: ImageMatcher composing the above

The preprocess() and correlate() functions stay in their modules so the
package attributes keep naming the submodules.
"""
from .preprocess import (
    PreprocessOptions,
    resize_to_width,
    to_gray,
    to_bgr,
    equalize,
    denoise,
)
from .region import MatchRegion, Rect, crop, clamp_rect
from .results import MatchCandidate, MatchResult, MatchResults, ResultFilter
from .peaks import extract_peaks
from .diagnostics import MatchObserver, ArtifactObserver
from .matcher import ImageMatcher

__all__ = [
    "PreprocessOptions",
    "resize_to_width",
    "to_gray",
    "to_bgr",
    "equalize",
    "denoise",
    "MatchRegion",
    "Rect",
    "crop",
    "clamp_rect",
    "MatchCandidate",
    "MatchResult",
    "MatchResults",
    "ResultFilter",
    "extract_peaks",
    "MatchObserver",
    "ArtifactObserver",
    "ImageMatcher",
]
