"""Character and byte n-gram extraction.

Turns raw text into a ranked list of n-grams (lengths 1-5), the "fingerprint"
used both for category profiles and for the documents being classified.

Words are padded with one leading and four trailing boundary markers
(``_word____``) so that grams touching the start or end of a word are
counted separately from grams in the middle. Grams ending in two boundary
markers carry no content and are discarded.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable

from .models import (
    BOUNDARY,
    MAX_NGRAM,
    MAX_PATTERNS,
    MIN_NGRAM,
    ExtractionMode,
    Gram,
    Pattern,
)

logger = logging.getLogger(__name__)

_TAIL = MAX_NGRAM - 1
_STR_TAIL = BOUNDARY * 2
_BYTES_TAIL = _STR_TAIL.encode("ascii")


# ---------------------------------------------------------------------------
# Word splitting
# ---------------------------------------------------------------------------

def _letters_only(text: str) -> str:
    """Replace every non-letter character with a space."""
    return "".join(ch if ch.isalpha() else " " for ch in text)


def _lower_letter(ch: str) -> str:
    # "İ".lower() is "i" plus a combining dot; keep only the letters.
    return "".join(filter(str.isalpha, ch.lower()))


def split_words(text: str) -> list[str]:
    """Split text into lower-cased runs of letters."""
    return "".join(_lower_letter(ch) if ch.isalpha() else " " for ch in text).split()


def split_byte_words(text: str) -> list[bytes]:
    """Split text into runs of letters, as UTF-8 bytes with case kept."""
    return _letters_only(text).encode("utf-8").split()


def letter_count(text: str) -> int:
    """Number of letters left once non-letter runs and whitespace are removed."""
    return sum(1 for ch in text if ch.isalpha())


# ---------------------------------------------------------------------------
# Counting and ranking
# ---------------------------------------------------------------------------

def _count_word(padded: Gram, tail: Gram, counts: Counter) -> None:
    for i in range(len(padded) - _TAIL):
        for n in range(MIN_NGRAM, MAX_NGRAM + 1):
            gram = padded[i : i + n]
            if not gram.endswith(tail):
                counts[gram] += 1


def count_ngrams(text: str, mode: ExtractionMode = ExtractionMode.CODEPOINTS) -> Counter:
    """Count every surviving n-gram in text.

    Args:
        text: Raw input text.
        mode: ``CODEPOINTS`` lower-cases the text and keeps only runs of
            letters; ``BYTES`` keeps the same runs of letters but counts
            their UTF-8 bytes without case folding.

    Returns:
        Counter mapping each gram (``str`` or ``bytes`` depending on mode)
        to its number of occurrences.
    """
    mode = ExtractionMode(mode)
    counts: Counter = Counter()

    if mode is ExtractionMode.CODEPOINTS:
        pad = BOUNDARY * _TAIL
        for word in split_words(text):
            _count_word(BOUNDARY + word + pad, _STR_TAIL, counts)
    else:
        marker = BOUNDARY.encode("ascii")
        pad = marker * _TAIL
        for word in split_byte_words(text):
            _count_word(marker + word + pad, _BYTES_TAIL, counts)

    return counts


def rank_ngrams(counts: dict, limit: int = MAX_PATTERNS) -> list[Pattern]:
    """Order grams by descending count, ties by ascending gram, and rank them."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        Pattern(gram=gram, count=count, rank=rank)
        for rank, (gram, count) in enumerate(ordered[:limit])
    ]


def extract_patterns(
    text: str,
    mode: ExtractionMode = ExtractionMode.CODEPOINTS,
) -> list[Pattern]:
    """Build the ranked n-gram profile of a text.

    Example::

        >>> [p.gram for p in extract_patterns("banana")][:3]
        ['a', 'an', 'ana']

    Args:
        text: Raw input text.
        mode: Extraction mode; profiles and the documents compared with them
            must use the same mode.

    Returns:
        At most ``MAX_PATTERNS`` patterns, rank 0 being the most frequent.
    """
    counts = count_ngrams(text, mode)
    patterns = rank_ngrams(counts)
    logger.debug(
        "Extracted %d distinct n-grams (%s mode), kept %d",
        len(counts), ExtractionMode(mode).value, len(patterns),
    )
    return patterns


def extract_ranks(text: str, mode: ExtractionMode = ExtractionMode.CODEPOINTS) -> dict:
    """Map each gram of the ranked profile of text to its rank."""
    return {p.gram: p.rank for p in extract_patterns(text, mode)}


def join_samples(samples: Iterable[str]) -> str:
    """Concatenate training samples without merging words across them."""
    return "\n".join(samples)
