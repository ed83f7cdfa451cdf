"""Category profiles and the registry that owns them.

A ``CategoryProfile`` is the immutable gram-to-rank table of one category.
The ``ProfileRegistry`` keeps every known category together with its
enabled flag and (optional) profile, and is the only mutable state the
classifier reads.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from .models import MAX_NGRAM, MAX_PATTERNS, Category, ExtractionMode, Pattern
from .patterns import extract_patterns, join_samples

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Category Profile
# ---------------------------------------------------------------------------

def _check_pair(gram: object, rank: object) -> None:
    if not isinstance(gram, str) or not 1 <= len(gram) <= MAX_NGRAM:
        raise ValueError(f"invalid n-gram: {gram!r}")
    if isinstance(rank, bool) or not isinstance(rank, int):
        raise ValueError(f"rank of {gram!r} is not an integer: {rank!r}")
    if not 0 <= rank < MAX_PATTERNS:
        raise ValueError(f"rank of {gram!r} out of range: {rank}")


class CategoryProfile:
    """Ranked n-gram table for one category.

    Grams absent from the profile have rank ``MAX_PATTERNS``, i.e. they are
    maximally distant. Instances never change after construction; retraining
    a category builds a new profile.

    Example::

        profile = CategoryProfile.from_text("The quick brown fox ...")
        profile.rank("th")     # 0..999
        profile.rank("zzz")    # 1000
    """

    __slots__ = ("_ranks",)

    def __init__(self, ranks: Mapping[str, int]) -> None:
        """Wrap a gram-to-rank table.

        Raises:
            ValueError: If a gram is not a 1-5 character string or a rank is
                out of range or shared by two grams.
        """
        ranks = dict(ranks)
        for gram, rank in ranks.items():
            _check_pair(gram, rank)
        if len(set(ranks.values())) != len(ranks):
            raise ValueError("duplicate rank in profile")
        self._ranks = MappingProxyType(ranks)

    @classmethod
    def from_patterns(cls, patterns: Iterable[Pattern]) -> "CategoryProfile":
        """Build a profile from a ranked pattern list."""
        return cls({p.gram: p.rank for p in patterns if p.rank < MAX_PATTERNS})

    @classmethod
    def from_text(cls, *samples: str) -> "CategoryProfile":
        """Train a profile from one or more text samples.

        Samples are treated as one text. Training always uses code-point
        extraction.
        """
        text = join_samples(samples)
        return cls.from_patterns(extract_patterns(text, ExtractionMode.CODEPOINTS))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, int]]) -> "CategoryProfile":
        """Build a profile from ``(gram, rank)`` pairs, validating them.

        Raises:
            ValueError: If a gram is not a 1-5 character string or a rank is
                out of range, duplicated, or assigned twice to one gram.
        """
        ranks: dict[str, int] = {}
        seen: set[int] = set()
        for gram, rank in pairs:
            _check_pair(gram, rank)
            if gram in ranks:
                raise ValueError(f"duplicate n-gram: {gram!r}")
            if rank in seen:
                raise ValueError(f"duplicate rank: {rank}")
            ranks[gram] = rank
            seen.add(rank)
        return cls(ranks)

    def rank(self, gram: str) -> int:
        """Rank of gram, or ``MAX_PATTERNS`` when the profile lacks it."""
        return self._ranks.get(gram, MAX_PATTERNS)

    @property
    def ranks(self) -> Mapping[str, int]:
        """Read-only view of the gram-to-rank table."""
        return self._ranks

    def to_pairs(self) -> list[tuple[str, int]]:
        """``(gram, rank)`` pairs in rank order."""
        return sorted(self._ranks.items(), key=lambda x: x[1])

    def __len__(self) -> int:
        return len(self._ranks)

    def __contains__(self, gram: object) -> bool:
        return gram in self._ranks

    def __iter__(self) -> Iterator[str]:
        return (gram for gram, _ in self.to_pairs())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategoryProfile):
            return NotImplemented
        return dict(self._ranks) == dict(other._ranks)

    def __hash__(self) -> int:
        return hash(frozenset(self._ranks.items()))

    def __repr__(self) -> str:
        return f"CategoryProfile(patterns={len(self)})"


# ---------------------------------------------------------------------------
# Profile Registry
# ---------------------------------------------------------------------------

def _check_id(category_id: int) -> int:
    if isinstance(category_id, bool) or not isinstance(category_id, int):
        raise TypeError(f"category id must be an int, got {category_id!r}")
    return category_id


class ProfileRegistry:
    """The set of known categories, their flags and their profiles.

    Categories come into existence when a profile is installed (by
    ``train`` or ``set_profile``) and are never removed; enabling or
    disabling an unknown id does nothing.

    All mutations and snapshot reads are serialized by one lock. Profiles
    are immutable, so a snapshot stays valid after the lock is released.

    Example::

        registry = ProfileRegistry()
        registry.train(1, english_corpus)
        registry.train(2, french_corpus)
        registry.enable_all()
        registry.active_categories()   # [1, 2]
    """

    def __init__(self) -> None:
        self._categories: dict[int, Category] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def enable(self, *category_ids: int) -> None:
        """Enable the given categories; unknown ids are ignored."""
        self._set_enabled(category_ids, True)

    def disable(self, *category_ids: int) -> None:
        """Disable the given categories; unknown ids are ignored."""
        self._set_enabled(category_ids, False)

    def enable_all(self) -> None:
        with self._lock:
            for category in self._categories.values():
                category.enabled = True

    def disable_all(self) -> None:
        with self._lock:
            for category in self._categories.values():
                category.enabled = False

    def _set_enabled(self, category_ids: Iterable[int], enabled: bool) -> None:
        with self._lock:
            for category_id in category_ids:
                category = self._categories.get(_check_id(category_id))
                if category is None:
                    logger.debug("Ignoring unknown category %d", category_id)
                    continue
                category.enabled = enabled

    def is_enabled(self, category_id: int) -> bool:
        with self._lock:
            category = self._categories.get(category_id)
            return category is not None and category.enabled

    def active_categories(self) -> list[int]:
        """Sorted ids of enabled categories."""
        with self._lock:
            return sorted(cid for cid, c in self._categories.items() if c.enabled)

    def available_categories(self) -> list[int]:
        """Sorted ids of every known category."""
        with self._lock:
            return sorted(self._categories)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def set_profile(self, category_id: int, profile: CategoryProfile) -> None:
        """Install or replace the profile of a category.

        New categories start disabled; an existing category keeps its flag.
        """
        _check_id(category_id)
        if not isinstance(profile, CategoryProfile):
            raise TypeError(f"expected a CategoryProfile, got {type(profile).__name__}")
        with self._lock:
            category = self._categories.get(category_id)
            if category is None:
                self._categories[category_id] = Category(category_id, profile=profile)
            else:
                category.profile = profile

    def train(self, category_id: int, *samples: str) -> Optional[CategoryProfile]:
        """Train a category from text samples and install the new profile.

        Empty input (no samples, or no letters in them) leaves the registry
        untouched.

        Returns:
            The installed profile, or ``None`` when nothing was trained.
        """
        _check_id(category_id)
        profile = CategoryProfile.from_text(*samples)
        if not len(profile):
            logger.warning("Empty training input for category %d, ignored", category_id)
            return None
        self.set_profile(category_id, profile)
        logger.debug("Trained category %d with %d patterns", category_id, len(profile))
        return profile

    def get_profile(self, category_id: int) -> Optional[CategoryProfile]:
        with self._lock:
            category = self._categories.get(category_id)
            return category.profile if category is not None else None

    def get_category(self, category_id: int) -> Optional[Category]:
        """A copy of the category record, or ``None`` if unknown."""
        with self._lock:
            category = self._categories.get(category_id)
            if category is None:
                return None
            return Category(category.category_id, category.enabled, category.profile)

    def profiles(self) -> dict[int, CategoryProfile]:
        """Profiles of every trained category, keyed by id in ascending order."""
        with self._lock:
            return {
                cid: self._categories[cid].profile  # type: ignore[misc]
                for cid in sorted(self._categories)
                if self._categories[cid].profile is not None
            }

    def snapshot(self) -> tuple[tuple[int, CategoryProfile], ...]:
        """``(id, profile)`` of every enabled, trained category, by ascending id."""
        with self._lock:
            return tuple(
                (cid, c.profile)
                for cid, c in sorted(self._categories.items())
                if c.enabled and c.profile is not None
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        with self._lock:
            return category_id in self._categories

    def __repr__(self) -> str:
        return (
            f"ProfileRegistry(categories={len(self)}, "
            f"active={len(self.active_categories())})"
        )
