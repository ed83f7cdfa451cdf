"""textcat -- n-gram frequency-rank text categorization."""

__version__ = "0.1.0"

from .classifier import TextClassifier, distance, select_candidates
from .codec import (
    FORMAT_VERSION,
    decode_profiles,
    encode_profiles,
    load_profiles,
    save_profiles,
)
from .config import ClassifierConfig
from .errors import (
    AmbiguousError,
    ClassificationError,
    CorruptProfileError,
    NoProfilesError,
    TextCatError,
    TooShortError,
)
from .models import (
    MAX_PATTERNS,
    Category,
    ClassificationResult,
    ErrorKind,
    ExtractionMode,
    Pattern,
)
from .patterns import extract_patterns, letter_count
from .profiles import CategoryProfile, ProfileRegistry
from .sources import read_source

__all__ = [
    # Extraction
    "extract_patterns",
    "letter_count",
    "ExtractionMode",
    "Pattern",
    "MAX_PATTERNS",
    # Profiles
    "CategoryProfile",
    "ProfileRegistry",
    "Category",
    # Classification
    "TextClassifier",
    "ClassifierConfig",
    "ClassificationResult",
    "distance",
    "select_candidates",
    # Errors
    "ErrorKind",
    "TextCatError",
    "ClassificationError",
    "TooShortError",
    "NoProfilesError",
    "AmbiguousError",
    "CorruptProfileError",
    # Persistence
    "encode_profiles",
    "decode_profiles",
    "save_profiles",
    "load_profiles",
    "FORMAT_VERSION",
    # Sources
    "read_source",
]
