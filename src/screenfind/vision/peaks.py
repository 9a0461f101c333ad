"""
Greedy peak extraction over a correlation surface.

Repeatedly takes the global maximum, accepts it unless it collides with an
already accepted match, then blanks a template-sized window (grown by the
filter deltas) around it so the same feature cannot be found twice. Stops once
the maximum drops below the precision threshold. Results therefore come out in
descending score order.

The surface is mutated in place; callers pass a buffer they own for the
duration of one matching call.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple
import logging

import cv2
import numpy as np

from .region import Rect, clamp_rect
from .results import MatchCandidate, MatchResult, ResultFilter

logger = logging.getLogger(__name__)

# Fill value for explored cells; below every finite threshold
SUPPRESSED = -np.inf

CandidateHook = Callable[[MatchCandidate, bool], None]


def suppression_rect(
    loc: Tuple[int, int],
    template_size: Tuple[int, int],
    result_filter: ResultFilter,
    bounds: Tuple[int, int],
) -> Rect:
    """Window of (tw + 2*dx) x (th + 2*dy) centred on loc, clipped to bounds=(cols, rows)."""
    x, y = loc
    tw, th = template_size
    x0 = x - tw // 2 - result_filter.x_delta
    y0 = y - th // 2 - result_filter.y_delta
    x1 = x0 + tw + 2 * result_filter.x_delta
    y1 = y0 + th + 2 * result_filter.y_delta
    left, top = max(x0, 0), max(y0, 0)
    return clamp_rect(Rect(left, top, x1 - left, y1 - top), bounds)


def _collides(candidate: MatchCandidate, accepted: List[MatchResult], result_filter: ResultFilter) -> bool:
    for result in accepted:
        if result_filter.collides(candidate, result):
            return True
    return False


def extract_peaks(
    surface: np.ndarray,
    template_size: Tuple[int, int],
    precision: float,
    result_filter: Optional[ResultFilter] = None,
    on_candidate: Optional[CandidateHook] = None,
) -> List[MatchResult]:
    """Return accepted matches from surface (mutated in place).

    template_size: (width, height) of the processed template
    on_candidate: called once per iteration with (candidate, accepted)
    """
    flt = result_filter or ResultFilter()
    rows, cols = surface.shape[:2]
    accepted: List[MatchResult] = []
    iterations = 0

    while True:
        _, max_val, _, max_loc = cv2.minMaxLoc(surface)
        if max_val == SUPPRESSED or max_val < precision:
            logger.debug("match: max %.4f < threshold %.4f after %d iterations", max_val, precision, iterations)
            break
        iterations += 1

        left, top = int(max_loc[0]), int(max_loc[1])
        candidate = MatchCandidate(left, top, float(max_val))
        hit = not _collides(candidate, accepted, flt)
        if hit:
            accepted.append(MatchResult(left, top, float(max_val)))
            logger.debug("match: hit (%d, %d) precision=%.4f", left, top, max_val)

        r = suppression_rect((left, top), template_size, flt, (cols, rows))
        surface[r.y:r.y + r.height, r.x:r.x + r.width] = SUPPRESSED

        if on_candidate is not None:
            on_candidate(candidate, hit)

    return accepted
