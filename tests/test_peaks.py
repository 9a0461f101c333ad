import numpy as np
import pytest

from screenfind.core.errors import InvalidConfiguration
from screenfind.vision import peaks
from screenfind.vision.peaks import SUPPRESSED, extract_peaks, suppression_rect
from screenfind.vision.region import Rect
from screenfind.vision.results import MatchCandidate, MatchResult, ResultFilter


def _surface(shape=(40, 40)):
    return np.zeros(shape, dtype=np.float32)


def test_filter_defaults():
    f = ResultFilter()
    assert (f.x_delta, f.y_delta) == (5, 5)


def test_filter_inclusive_bounds():
    f = ResultFilter(5, 5)
    a = MatchResult(10, 10, 1.0)
    assert f.collides(MatchCandidate(15, 5, 0.9), a)
    assert not f.collides(MatchCandidate(16, 10, 0.9), a)
    assert not f.collides(MatchCandidate(10, 4, 0.9), a)


@pytest.mark.parametrize("p,q", [((0, 0), (5, 5)), ((3, 9), (9, 3)), ((10, 10), (4, 16)), ((0, 7), (6, 0))])
def test_filter_symmetry(p, q):
    f = ResultFilter(5, 5)
    a, b = MatchResult(*p, 1.0), MatchResult(*q, 1.0)
    assert f.collides(a, b) == f.collides(b, a)


def test_filter_rejects_negative_deltas():
    with pytest.raises(InvalidConfiguration):
        ResultFilter(-1, 0)


def test_filter_parse():
    assert ResultFilter.parse("3") == ResultFilter(3, 3)
    assert ResultFilter.parse("3,7") == ResultFilter(3, 7)
    with pytest.raises(InvalidConfiguration):
        ResultFilter.parse("1,2,3")


def test_suppression_rect_is_centred_and_clipped():
    f = ResultFilter(2, 1)
    assert suppression_rect((20, 20), (6, 4), f, (40, 40)) == Rect(15, 17, 10, 6)
    assert suppression_rect((0, 0), (6, 4), f, (40, 40)) == Rect(0, 0, 5, 3)
    assert suppression_rect((39, 39), (6, 4), f, (40, 40)) == Rect(34, 36, 6, 4)


def test_peaks_in_descending_order():
    s = _surface()
    s[5, 5] = 0.95
    s[30, 20] = 0.99
    s[20, 35] = 0.97
    out = extract_peaks(s, (4, 4), 0.9)
    assert [(r.left, r.top) for r in out] == [(20, 30), (35, 20), (5, 5)]
    assert [r.precision for r in out] == sorted((r.precision for r in out), reverse=True)


def test_below_threshold_yields_nothing():
    s = _surface()
    s[10, 10] = 0.5
    assert extract_peaks(s, (4, 4), 0.9) == []


def test_peaks_merge_within_window_and_split_beyond():
    s = _surface()
    s[10, 10] = 0.99
    s[10, 13] = 0.98
    calls = []
    out = extract_peaks(s, (1, 1), 0.9, ResultFilter(5, 5), on_candidate=lambda c, ok: calls.append((c, ok)))
    assert [(r.left, r.top) for r in out] == [(10, 10)]
    assert len(calls) == 1  # (13, 10) falls inside the 11x11 suppression window

    s = _surface()
    s[10, 10] = 0.99
    s[10, 16] = 0.98
    out = extract_peaks(s, (1, 1), 0.9, ResultFilter(5, 5))
    assert [(r.left, r.top) for r in out] == [(10, 10), (16, 10)]


def test_colliding_candidate_is_rejected_but_suppressed(monkeypatch):
    monkeypatch.setattr(peaks, "suppression_rect", lambda loc, size, flt, bounds: Rect(loc[0], loc[1], 1, 1))
    s = _surface()
    s[10, 10] = 0.99
    s[10, 12] = 0.98
    s[10, 30] = 0.97
    calls = []
    out = extract_peaks(s, (1, 1), 0.9, ResultFilter(5, 5), on_candidate=lambda c, ok: calls.append((c.left, ok)))
    assert calls == [(10, True), (12, False), (30, True)]
    assert [(r.left, r.top) for r in out] == [(10, 10), (30, 10)]
    assert s[10, 12] == SUPPRESSED


def test_tight_filter_keeps_peaks_outside_suppression():
    s = _surface()
    s[10, 10] = 0.99
    s[10, 11] = 0.98
    s[10, 12] = 0.97
    calls = []
    out = extract_peaks(s, (1, 1), 0.9, ResultFilter(1, 0), on_candidate=lambda c, ok: calls.append((c.left, ok)))
    # 11 is blanked by the first window; 12 survives and is far enough to be kept
    assert calls == [(10, True), (12, True)]
    assert len(out) == 2


def test_termination_bound_on_flat_surface():
    s = np.ones((20, 20), dtype=np.float32)
    calls = []
    out = extract_peaks(s, (3, 3), 0.5, ResultFilter(1, 1), on_candidate=lambda c, ok: calls.append(ok))
    assert 0 < len(calls) <= s.size
    assert np.all(s == SUPPRESSED)
    # every accepted pair is at least one filter window apart
    f = ResultFilter(1, 1)
    for i, a in enumerate(out):
        for b in out[i + 1:]:
            assert not f.collides(a, b)


def test_threshold_at_or_below_zero_still_terminates():
    s = np.zeros((8, 8), dtype=np.float32)
    out = extract_peaks(s, (2, 2), -1.0, ResultFilter(0, 0))
    assert len(out) >= 1
    assert np.all(s == SUPPRESSED)


def test_surface_is_mutated_in_place():
    s = _surface()
    s[10, 10] = 0.99
    extract_peaks(s, (4, 4), 0.9)
    assert s[10, 10] == SUPPRESSED
    assert s[0, 0] == 0.0
