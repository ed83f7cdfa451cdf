"""N-gram rank distance classifier.

Scores a document against every enabled, trained category with the
"out-of-place" measure: for each n-gram of the document's ranked profile,
add the distance between its rank in the document and its rank in the
category profile (``MAX_PATTERNS`` if the category lacks it). Lower is
closer. Because only ranks are compared, the measure does not depend on
document length or corpus size.

Every category scoring within ``threshold_value`` times the best score is a
candidate. More than ``max_candidates`` candidates means the document can
not be told apart reliably and classification fails as ambiguous.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from .config import ClassifierConfig
from .errors import AmbiguousError, ClassificationError, NoProfilesError, TooShortError
from .models import ClassificationResult, ExtractionMode, Pattern
from .patterns import extract_patterns, letter_count
from .profiles import CategoryProfile, ProfileRegistry

logger = logging.getLogger(__name__)


def distance(patterns: Sequence[Pattern], profile: CategoryProfile) -> int:
    """Out-of-place distance between a document profile and a category."""
    return sum(abs(p.rank - profile.rank(p.gram)) for p in patterns)


def select_candidates(
    scores: dict[int, int],
    threshold_value: float,
) -> ClassificationResult:
    """Keep the categories scoring within ``threshold_value`` of the best.

    Candidates are ordered by ascending score, then ascending id.
    """
    if not scores:
        return ClassificationResult()
    threshold = min(scores.values()) * threshold_value
    candidates = sorted(
        (cid for cid, score in scores.items() if score <= threshold),
        key=lambda cid: (scores[cid], cid),
    )
    return ClassificationResult(categories=candidates, scores=dict(scores), threshold=threshold)


class TextClassifier:
    """Classifies documents against the profiles of a ``ProfileRegistry``.

    The classifier holds no profile data itself. Each call takes a snapshot
    of the registry's enabled, trained categories, so any number of threads
    may classify while another thread retrains or toggles categories.

    Example::

        registry = ProfileRegistry()
        registry.train(1, english_text)
        registry.train(2, french_text)
        registry.enable_all()

        classifier = TextClassifier(registry)
        result = classifier.classify("The weather is lovely this afternoon.")
        print(result.categories)   # [1]

    Args:
        registry: Registry providing categories and profiles.
        config: Initial settings. When omitted, defaults and any
            ``TEXTCAT_*`` environment variables apply. Settings can be
            changed later through the classifier's properties.
    """

    def __init__(
        self,
        registry: ProfileRegistry,
        config: Optional[ClassifierConfig] = None,
    ) -> None:
        if config is None:
            config = ClassifierConfig()
        self._registry = registry
        self._config = config.model_copy()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def registry(self) -> ProfileRegistry:
        return self._registry

    @property
    def threshold_value(self) -> float:
        return self._config.threshold_value

    @threshold_value.setter
    def threshold_value(self, value: float) -> None:
        self._config.threshold_value = value

    @property
    def max_candidates(self) -> int:
        return self._config.max_candidates

    @max_candidates.setter
    def max_candidates(self, value: int) -> None:
        self._config.max_candidates = value

    @property
    def min_doc_size(self) -> int:
        return self._config.min_doc_size

    @min_doc_size.setter
    def min_doc_size(self, value: int) -> None:
        self._config.min_doc_size = value

    @property
    def config(self) -> ClassifierConfig:
        """Current settings as a new ``ClassifierConfig``."""
        return self._config.model_copy()

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def score(self, document: str) -> dict[int, int]:
        """Distance of the document to every enabled, trained category.

        No length gate is applied.

        Raises:
            NoProfilesError: If no enabled category has a profile.
        """
        patterns = extract_patterns(document, ExtractionMode.CODEPOINTS)
        return self._score_patterns(patterns)

    def _score_patterns(self, patterns: Sequence[Pattern]) -> dict[int, int]:
        snapshot = self._registry.snapshot()
        if not snapshot:
            raise NoProfilesError()
        scores = {cid: distance(patterns, profile) for cid, profile in snapshot}
        logger.debug("Scored %d categories: %s", len(scores), scores)
        return scores

    def classify(self, document: str) -> ClassificationResult:
        """Classify a document.

        Args:
            document: Raw text.

        Returns:
            ClassificationResult whose ``categories`` hold the candidate ids,
            best match first.

        Raises:
            TooShortError: If the document has fewer than ``min_doc_size``
                letters.
            NoProfilesError: If no enabled category has a profile.
            AmbiguousError: If more than ``max_candidates`` categories are
                candidates. The full result is available on the exception.
        """
        threshold_value = self._config.threshold_value
        max_candidates = self._config.max_candidates
        min_doc_size = self._config.min_doc_size

        letters = letter_count(document)
        if letters < min_doc_size:
            raise TooShortError(letters, min_doc_size)

        patterns = extract_patterns(document, ExtractionMode.CODEPOINTS)
        scores = self._score_patterns(patterns)

        result = select_candidates(scores, threshold_value)
        if len(result.categories) > max_candidates:
            logger.debug(
                "Ambiguous document: %d candidates within %.1f",
                len(result.categories), result.threshold,
            )
            raise AmbiguousError(result, max_candidates)
        return result

    def classify_batch(
        self,
        documents: Sequence[str],
    ) -> list[Union[ClassificationResult, ClassificationError]]:
        """Classify several documents.

        Failures do not stop the batch: the entry for a failed document is
        the ``ClassificationError`` it raised.
        """
        results: list[Union[ClassificationResult, ClassificationError]] = []
        for document in documents:
            try:
                results.append(self.classify(document))
            except ClassificationError as exc:
                results.append(exc)
        return results
