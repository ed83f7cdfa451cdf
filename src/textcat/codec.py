"""Binary persistence of trained profiles.

Wire layout::

    b"TCAT"  | version (1 byte) | gzip(JSON document)

The JSON document of version 1 is::

    {
      "max_patterns": 1000,
      "categories": [
        {"id": 1, "patterns": [["_t", 0], ["th", 1], ...]},
        ...
      ]
    }

Categories appear in ascending id order and patterns in rank order.
Enabled flags are not stored; every loaded category starts disabled.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from pathlib import Path
from typing import Optional

from .errors import CorruptProfileError
from .models import MAX_PATTERNS
from .profiles import CategoryProfile, ProfileRegistry

logger = logging.getLogger(__name__)

MAGIC = b"TCAT"
FORMAT_VERSION = 1
_HEADER_SIZE = len(MAGIC) + 1


def encode_profiles(registry: ProfileRegistry) -> bytes:
    """Serialize every trained profile of a registry."""
    document = {
        "max_patterns": MAX_PATTERNS,
        "categories": [
            {"id": cid, "patterns": [[gram, rank] for gram, rank in profile.to_pairs()]}
            for cid, profile in registry.profiles().items()
        ],
    }
    payload = json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return MAGIC + bytes([FORMAT_VERSION]) + gzip.compress(payload, mtime=0)


def decode_profiles(
    data: bytes,
    registry: Optional[ProfileRegistry] = None,
) -> ProfileRegistry:
    """Rebuild profiles from bytes produced by ``encode_profiles``.

    Args:
        data: Encoded profile set.
        registry: Registry to install the profiles into. A new, empty
            registry is used when omitted. Existing categories keep their
            enabled flag; new ones start disabled.

    Returns:
        The registry holding the decoded profiles.

    Raises:
        CorruptProfileError: If the data is not a valid encoded profile set.
            The target registry is not modified in that case.
    """
    profiles = _decode(bytes(data))
    registry = registry if registry is not None else ProfileRegistry()
    for cid, profile in profiles.items():
        registry.set_profile(cid, profile)
    logger.debug("Decoded %d category profiles", len(profiles))
    return registry


def _decode(data: bytes) -> dict[int, CategoryProfile]:
    if len(data) < _HEADER_SIZE or not data.startswith(MAGIC):
        raise CorruptProfileError("not a textcat profile file (bad magic)")
    version = data[len(MAGIC)]
    if version != FORMAT_VERSION:
        raise CorruptProfileError(f"unsupported profile format version {version}")

    try:
        payload = gzip.decompress(data[_HEADER_SIZE:])
        document = json.loads(payload.decode("utf-8"))
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, ValueError,
            RecursionError) as exc:
        raise CorruptProfileError(f"unreadable profile payload: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("categories"), list):
        raise CorruptProfileError("profile payload has no category list")
    if document.get("max_patterns") != MAX_PATTERNS:
        raise CorruptProfileError(
            f"profile built for max_patterns={document.get('max_patterns')!r}, "
            f"expected {MAX_PATTERNS}"
        )

    profiles: dict[int, CategoryProfile] = {}
    for entry in document["categories"]:
        if not isinstance(entry, dict):
            raise CorruptProfileError("category entry is not an object")
        cid = entry.get("id")
        patterns = entry.get("patterns")
        if isinstance(cid, bool) or not isinstance(cid, int):
            raise CorruptProfileError(f"invalid category id: {cid!r}")
        if cid in profiles:
            raise CorruptProfileError(f"duplicate category id: {cid}")
        if not isinstance(patterns, list):
            raise CorruptProfileError(f"category {cid} has no pattern list")
        try:
            pairs = [_pair(item) for item in patterns]
            profiles[cid] = CategoryProfile.from_pairs(pairs)
        except ValueError as exc:
            raise CorruptProfileError(f"category {cid}: {exc}") from exc
    return profiles


def _pair(item: object) -> tuple[str, int]:
    if not isinstance(item, list) or len(item) != 2:
        raise ValueError(f"pattern entry is not a [gram, rank] pair: {item!r}")
    return item[0], item[1]


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def save_profiles(registry: ProfileRegistry, path: str | Path) -> None:
    """Write the encoded profiles of a registry to a file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_profiles(registry))
    logger.info("Saved %d profiles to %s", len(registry.profiles()), path)


def load_profiles(
    path: str | Path,
    registry: Optional[ProfileRegistry] = None,
) -> ProfileRegistry:
    """Read a profile file written by ``save_profiles``.

    Raises:
        FileNotFoundError: If the file does not exist.
        CorruptProfileError: If its content is not a valid profile set.
    """
    data = Path(path).read_bytes()
    return decode_profiles(data, registry)
