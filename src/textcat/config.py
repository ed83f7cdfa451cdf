"""Classifier settings.

Defaults follow the classical n-gram categorizer: candidates within 3% of
the best score, at most five of them, and at least 25 letters of text.
Unset fields are read from ``TEXTCAT_*`` environment variables, e.g.
``TEXTCAT_MIN_DOC_SIZE=40``.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_THRESHOLD_VALUE = 1.03
DEFAULT_MAX_CANDIDATES = 5
DEFAULT_MIN_DOC_SIZE = 25

ENV_PREFIX = "TEXTCAT_"


class ClassifierConfig(BaseSettings):
    """Tunable classification settings.

    Keyword arguments take precedence over the environment. Invalid values
    raise ``pydantic.ValidationError``, a ``ValueError`` subclass, both on
    construction and on assignment.

    Args:
        threshold_value: Multiplier applied to the best score; every category
            scoring at or below ``best * threshold_value`` is a candidate.
        max_candidates: Largest number of candidates reported before the
            document is declared ambiguous.
        min_doc_size: Minimum number of letters a document must contain.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        validate_assignment=True,
    )

    threshold_value: float = Field(DEFAULT_THRESHOLD_VALUE, ge=1.0, allow_inf_nan=False)
    max_candidates: int = Field(DEFAULT_MAX_CANDIDATES, ge=1)
    min_doc_size: int = Field(DEFAULT_MIN_DOC_SIZE, ge=1)

    def to_dict(self) -> dict:
        return self.model_dump()
