"""Match value types and the spatial deduplication filter."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..config.vision import DEFAULT_X_DELTA, DEFAULT_Y_DELTA
from ..core.errors import InvalidConfiguration


@dataclass(frozen=True)
class MatchCandidate:
    """Location and score of the surface's global maximum at one iteration."""

    left: int
    top: int
    score: float


@dataclass(frozen=True)
class MatchResult:
    left: int
    top: int
    precision: float


@dataclass
class MatchResults:
    """Accepted matches in discovery (= descending score) order.

    width/height are the processed template's dimensions used for the call.
    """

    width: int
    height: int
    matches: List[MatchResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.matches)

    def __iter__(self) -> Iterator[MatchResult]:
        return iter(self.matches)

    def first(self) -> Optional[MatchResult]:
        return self.matches[0] if self.matches else None

    def center(self, result: MatchResult) -> Tuple[int, int]:
        """Click point of a match: the centre of its template-sized footprint."""
        return result.left + self.width // 2, result.top + self.height // 2


@dataclass(frozen=True)
class ResultFilter:
    """Rectangular exclusion window deciding whether two peaks are the same feature."""

    x_delta: int = DEFAULT_X_DELTA
    y_delta: int = DEFAULT_Y_DELTA

    def __post_init__(self) -> None:
        if self.x_delta < 0 or self.y_delta < 0:
            raise InvalidConfiguration(
                f"filter deltas must be >= 0, got ({self.x_delta}, {self.y_delta})"
            )

    @classmethod
    def parse(cls, text: str) -> "ResultFilter":
        """Parse "dx,dy" (or a single value used for both axes)."""
        parts = [p.strip() for p in str(text or "").split(",") if p.strip()]
        try:
            values = [int(p) for p in parts]
        except ValueError as e:
            raise InvalidConfiguration(f"filter deltas must be integers, got {text!r}") from e
        if len(values) == 1:
            return cls(values[0], values[0])
        if len(values) == 2:
            return cls(values[0], values[1])
        raise InvalidConfiguration(f"filter must be 'dx,dy', got {text!r}")

    def collides(self, candidate, accepted) -> bool:
        """True if both points lie within the inclusive (x_delta, y_delta) window."""
        return (
            abs(int(candidate.left) - int(accepted.left)) <= self.x_delta
            and abs(int(candidate.top) - int(accepted.top)) <= self.y_delta
        )
