"""Exceptions raised by the classifier and the profile codec.

Every exception here is recoverable: the registry and the classifier are
left exactly as they were before the failing call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import ErrorKind

if TYPE_CHECKING:
    from .models import ClassificationResult


class TextCatError(Exception):
    """Base class for all textcat errors."""

    kind: ErrorKind


class ClassificationError(TextCatError):
    """A document could not be assigned a category."""


class TooShortError(ClassificationError):
    """The document has fewer letters than ``min_doc_size``."""

    kind = ErrorKind.TOO_SHORT

    def __init__(self, letters: int, min_doc_size: int) -> None:
        super().__init__(
            f"document has {letters} letters, at least {min_doc_size} are required"
        )
        self.letters = letters
        self.min_doc_size = min_doc_size


class NoProfilesError(ClassificationError):
    """No enabled category has a trained profile."""

    kind = ErrorKind.NO_PROFILES

    def __init__(self, message: str = "no enabled category has a trained profile") -> None:
        super().__init__(message)


class AmbiguousError(ClassificationError):
    """Too many categories fall within the relative threshold.

    The full candidate list is kept on ``result`` so callers may still
    accept it.
    """

    kind = ErrorKind.AMBIGUOUS

    def __init__(self, result: "ClassificationResult", max_candidates: int) -> None:
        super().__init__(
            f"{len(result.categories)} candidate categories exceed the "
            f"maximum of {max_candidates}"
        )
        self.result = result
        self.max_candidates = max_candidates

    @property
    def candidates(self) -> list[int]:
        return list(self.result.categories)


class CorruptProfileError(TextCatError, ValueError):
    """Persisted profile data could not be decoded."""

    kind = ErrorKind.CORRUPT_PROFILE
