"""ScreenFind: locate template images inside screen captures."""
from .core.errors import (
    ScreenFindError,
    AssetNotFound,
    DecodeError,
    InvalidConfiguration,
    PrimitiveFailure,
)
from .vision import (
    ImageMatcher,
    MatchRegion,
    MatchResult,
    MatchResults,
    ResultFilter,
    MatchObserver,
    ArtifactObserver,
)

__version__ = "0.1.0"

__all__ = [
    "ScreenFindError",
    "AssetNotFound",
    "DecodeError",
    "InvalidConfiguration",
    "PrimitiveFailure",
    "ImageMatcher",
    "MatchRegion",
    "MatchResult",
    "MatchResults",
    "ResultFilter",
    "MatchObserver",
    "ArtifactObserver",
]
