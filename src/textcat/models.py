"""Data models for n-gram text categorization."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .profiles import CategoryProfile

MAX_PATTERNS = 1000
"""Size of a ranked profile; also the rank given to grams a profile lacks."""

MIN_NGRAM = 1
MAX_NGRAM = 5

BOUNDARY = "_"
"""Word boundary marker used for padding (``_word____``)."""


class ExtractionMode(str, Enum):
    """How words are cut into n-grams."""

    CODEPOINTS = "codepoints"
    BYTES = "bytes"


class ErrorKind(str, Enum):
    """Failure kinds reported by classification and profile loading."""

    TOO_SHORT = "TooShort"
    NO_PROFILES = "NoProfiles"
    AMBIGUOUS = "Ambiguous"
    CORRUPT_PROFILE = "CorruptProfile"


Gram = Union[str, bytes]


@dataclass(frozen=True)
class Pattern:
    """A single ranked n-gram."""

    gram: Gram
    count: int
    rank: int

    def to_dict(self) -> dict:
        gram = self.gram
        if isinstance(gram, bytes):
            gram = gram.decode("utf-8", errors="backslashreplace")
        return {"gram": gram, "count": self.count, "rank": self.rank}


@dataclass
class Category:
    """A category known to a registry."""

    category_id: int
    enabled: bool = False
    profile: Optional[CategoryProfile] = None

    @property
    def is_trained(self) -> bool:
        return self.profile is not None

    def to_dict(self) -> dict:
        return {
            "id": self.category_id,
            "enabled": self.enabled,
            "trained": self.is_trained,
            "patterns": len(self.profile) if self.profile is not None else 0,
        }


@dataclass
class ClassificationResult:
    """Outcome of classifying a single document.

    Attributes:
        categories: Candidate category ids, best match first (ascending
            score, ties broken by ascending id).
        scores: Distance score of every category that was scored, not only
            the candidates. Lower is closer.
        threshold: Score ceiling used to admit candidates.
    """

    categories: list[int] = field(default_factory=list)
    scores: dict[int, int] = field(default_factory=dict)
    threshold: float = 0.0

    @property
    def best(self) -> Optional[int]:
        """The closest category, or ``None`` for an empty result."""
        return self.categories[0] if self.categories else None

    @property
    def has_near_ties(self) -> bool:
        """More than one category fell within the threshold."""
        return len(self.categories) > 1

    def to_dict(self) -> dict:
        return {
            "categories": list(self.categories),
            "best": self.best,
            "threshold": round(self.threshold, 3),
            "scores": {
                str(cid): score
                for cid, score in sorted(self.scores.items(), key=lambda x: (x[1], x[0]))
            },
        }
