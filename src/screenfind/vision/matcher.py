"""
Template matcher: finds every occurrence of one template in a target image.

ImageMatcher prepares its template once (resize, grayscale or BGR) and keeps
it as a read-only array; each match() call is independent, allocating its own
target buffer, correlation surface and result list, so one matcher can serve
concurrent callers without locking.

Per call: crop to region -> grayscale -> geometric guard -> equalize both
images with the target's tables -> blur -> correlate -> extract peaks.
Coordinates are relative to the cropped region.

With blur on, only the template interior is correlated: its outer ring mixes
in pixels that differ between the template file and the screen. The surface
is shifted back so cell (x, y) still scores the template placed at (x, y).
"""
from __future__ import annotations

from typing import Optional, Tuple
import logging
import math
import time

import numpy as np

from ..config.vision import PERF_ENABLED
from ..core.errors import InvalidConfiguration
from ..io.assets import load_image
from .correlate import correlate, fits
from .diagnostics import MatchObserver
from .peaks import extract_peaks
from .preprocess import (
    PreprocessOptions,
    apply_luts,
    blur_margin,
    denoise,
    equalization_luts,
    preprocess,
    validate_buffer,
)
from .region import MatchRegion, crop
from .results import MatchCandidate, MatchResults, ResultFilter

logger = logging.getLogger(__name__)


def _read_only(img: np.ndarray) -> np.ndarray:
    view = img.view()
    view.flags.writeable = False
    return view


class _SafeObserver:
    """Forward hooks to an observer, logging instead of raising on failure."""

    def __init__(self, observer: Optional[MatchObserver]) -> None:
        self._observer = observer

    def _call(self, hook: str, *args) -> None:
        if self._observer is None:
            return
        try:
            getattr(self._observer, hook)(*args)
        except Exception as e:
            logger.warning("match: observer %s failed: %s", hook, e)

    def begin(self, target, template_size, precision) -> None:
        if self._observer is None:
            return
        self._call("begin", _read_only(target), template_size, precision)

    def surface(self, surface) -> None:
        if self._observer is None:
            return
        view = surface.copy()
        view.flags.writeable = False
        self._call("surface", view)

    def candidate(self, candidate: MatchCandidate, accepted: bool) -> None:
        self._call("candidate", candidate, accepted)

    def finish(self, results: MatchResults) -> None:
        self._call("finish", results)


class ImageMatcher:
    """Locate a template inside target images.

    use_gray: correlate luma instead of BGR colour
    resize_width: resample the template to this width (aspect preserved)
    equalize / blur: robustness stages of the preprocessing pipeline
    """

    def __init__(
        self,
        template: np.ndarray,
        use_gray: bool = True,
        resize_width: Optional[int] = None,
        *,
        equalize: bool = True,
        blur: bool = True,
    ) -> None:
        self.options = PreprocessOptions(grayscale=bool(use_gray), equalize=bool(equalize), blur=bool(blur))
        self._base = PreprocessOptions(grayscale=self.options.grayscale, equalize=False, blur=False)
        tpl = preprocess(validate_buffer(template, "template"), self._base, resize_width)
        tpl.flags.writeable = False
        self._template = tpl
        logger.debug(
            "match: template %dx%d ready (gray=%s equalize=%s blur=%s resize_width=%s)",
            self.width, self.height, use_gray, equalize, blur, resize_width,
        )

    @classmethod
    def from_asset(cls, store, name: str, **kwargs) -> "ImageMatcher":
        """Build a matcher from a named PNG in an AssetStore."""
        return cls(load_image(store, name), **kwargs)

    @property
    def template(self) -> np.ndarray:
        return self._template

    @property
    def width(self) -> int:
        return int(self._template.shape[1])

    @property
    def height(self) -> int:
        return int(self._template.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def _prepare(self, screen: np.ndarray) -> Tuple[np.ndarray, np.ndarray, Tuple[int, int]]:
        """Return (target, template, blur margin) ready for correlation."""
        tpl = self._template
        if self.options.equalize:
            luts = equalization_luts(screen)
            screen = apply_luts(screen, luts)
            tpl = apply_luts(tpl, luts)
        margin = (0, 0)
        if self.options.blur:
            screen = denoise(screen, self.options.blur_kernel)
            tpl = denoise(tpl, self.options.blur_kernel)
            margin = blur_margin(self.options.blur_kernel, tpl.shape)
        return screen, tpl, margin

    def _surface(self, screen: np.ndarray, tpl: np.ndarray, margin: Tuple[int, int]) -> np.ndarray:
        mx, my = margin
        if not (mx or my):
            return correlate(screen, tpl)
        core = np.ascontiguousarray(tpl[my:self.height - my, mx:self.width - mx])
        full = correlate(screen, core)
        rows = screen.shape[0] - self.height + 1
        cols = screen.shape[1] - self.width + 1
        return np.ascontiguousarray(full[my:my + rows, mx:mx + cols])

    def match(
        self,
        target: np.ndarray,
        precision: float,
        region: Optional[MatchRegion] = None,
        result_filter: Optional[ResultFilter] = None,
        observer: Optional[MatchObserver] = None,
    ) -> MatchResults:
        """Return every match scoring at least precision, best first.

        An empty result (not an error) means no placement was possible or
        none scored high enough.
        """
        try:
            precision = float(precision)
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"precision must be a number, got {precision!r}") from e
        if math.isnan(precision):
            raise InvalidConfiguration("precision must be a number, got nan")
        flt = result_filter or ResultFilter()
        obs = _SafeObserver(observer)
        perf = PERF_ENABLED or logger.isEnabledFor(logging.DEBUG)
        t0 = time.perf_counter()

        raw = crop(validate_buffer(target, "target"), region)
        obs.begin(raw, self.size, precision)
        screen = preprocess(raw, self._base)
        logger.debug(
            "match: screen %dx%d, template %dx%d, precision %.4f",
            screen.shape[1], screen.shape[0], self.width, self.height, precision,
        )

        if not fits(screen, self._template):
            logger.debug("match: template larger than search area, no placement possible")
            results = MatchResults(self.width, self.height, [])
            obs.finish(results)
            return results

        screen, tpl, margin = self._prepare(screen)
        surface = self._surface(screen, tpl, margin)
        t1 = time.perf_counter()
        obs.surface(surface)

        matches = extract_peaks(surface, self.size, precision, flt, on_candidate=obs.candidate)
        results = MatchResults(self.width, self.height, matches)
        obs.finish(results)

        if perf:
            t2 = time.perf_counter()
            logger.debug(
                "match: correlate %.1fms, peaks %.1fms, %d match(es)",
                (t1 - t0) * 1000.0, (t2 - t1) * 1000.0, len(matches),
            )
        return results
