"""Tests for binary profile persistence."""

from __future__ import annotations

import gzip
import json
from pathlib import Path

import pytest

from textcat.codec import (
    FORMAT_VERSION,
    MAGIC,
    decode_profiles,
    encode_profiles,
    load_profiles,
    save_profiles,
)
from textcat.errors import CorruptProfileError
from textcat.models import ErrorKind
from textcat.profiles import CategoryProfile, ProfileRegistry

from corpora import ENGLISH, ENGLISH_TEXT, FRENCH


def _payload(document: object) -> bytes:
    raw = json.dumps(document).encode("utf-8")
    return MAGIC + bytes([FORMAT_VERSION]) + gzip.compress(raw)


class TestRoundTrip:
    """encode -> decode preserves trained profiles, not flags."""

    def test_round_trip(self, registry: ProfileRegistry) -> None:
        decoded = decode_profiles(encode_profiles(registry))
        assert decoded.available_categories() == [ENGLISH, FRENCH]
        assert decoded.profiles() == registry.profiles()

    def test_flags_are_not_persisted(self, registry: ProfileRegistry) -> None:
        assert registry.active_categories() == [ENGLISH, FRENCH]
        decoded = decode_profiles(encode_profiles(registry))
        assert decoded.active_categories() == []

    def test_empty_registry(self) -> None:
        decoded = decode_profiles(encode_profiles(ProfileRegistry()))
        assert len(decoded) == 0

    def test_unicode_grams(self) -> None:
        reg = ProfileRegistry()
        reg.train(9, "Übung déjà 日本語 наука")
        decoded = decode_profiles(encode_profiles(reg))
        assert decoded.get_profile(9) == reg.get_profile(9)
        assert "日本" in decoded.get_profile(9)

    def test_encoding_is_deterministic(self, registry: ProfileRegistry) -> None:
        assert encode_profiles(registry) == encode_profiles(registry)

    def test_header(self, registry: ProfileRegistry) -> None:
        data = encode_profiles(registry)
        assert data[:4] == MAGIC
        assert data[4] == FORMAT_VERSION

    def test_schema(self, registry: ProfileRegistry) -> None:
        document = json.loads(gzip.decompress(encode_profiles(registry)[5:]))
        assert document["max_patterns"] == 1000
        ids = [entry["id"] for entry in document["categories"]]
        assert ids == [ENGLISH, FRENCH]
        ranks = [rank for _, rank in document["categories"][0]["patterns"]]
        assert ranks == list(range(len(ranks)))

    def test_decode_into_existing_registry(self, registry: ProfileRegistry) -> None:
        target = ProfileRegistry()
        target.train(ENGLISH, "something else entirely")
        target.enable(ENGLISH)
        decode_profiles(encode_profiles(registry), target)
        assert target.is_enabled(ENGLISH)
        assert target.is_enabled(FRENCH) is False
        assert target.get_profile(ENGLISH) == CategoryProfile.from_text(ENGLISH_TEXT)


class TestCorruptData:
    """Malformed data raises CorruptProfileError."""

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"TCA",
            b"NOPE\x01" + gzip.compress(b"{}"),
            MAGIC + bytes([FORMAT_VERSION + 1]) + gzip.compress(b"{}"),
            MAGIC + bytes([FORMAT_VERSION]) + b"not gzip at all",
            MAGIC + bytes([FORMAT_VERSION]) + gzip.compress(b"{}")[:-6],
            MAGIC + bytes([FORMAT_VERSION]) + gzip.compress(b"{not json"),
            MAGIC + bytes([FORMAT_VERSION]) + gzip.compress(b"\xff\xfe"),
            MAGIC + bytes([FORMAT_VERSION]) + gzip.compress(b"[" * 200000 + b"]" * 200000),
        ],
    )
    def test_bad_bytes(self, data: bytes) -> None:
        with pytest.raises(CorruptProfileError):
            decode_profiles(data)

    @pytest.mark.parametrize(
        "document",
        [
            [],
            {},
            {"max_patterns": 1000},
            {"max_patterns": 500, "categories": []},
            {"max_patterns": 1000, "categories": [1]},
            {"max_patterns": 1000, "categories": [{"id": "1", "patterns": []}]},
            {"max_patterns": 1000, "categories": [{"id": True, "patterns": []}]},
            {"max_patterns": 1000, "categories": [{"id": 1}]},
            {"max_patterns": 1000, "categories": [{"id": 1, "patterns": [["ab"]]}]},
            {"max_patterns": 1000, "categories": [{"id": 1, "patterns": [["ab", 1000]]}]},
            {"max_patterns": 1000, "categories": [{"id": 1, "patterns": [["ab", 0], ["cd", 0]]}]},
            {"max_patterns": 1000, "categories": [{"id": 1, "patterns": [["abcdef", 0]]}]},
            {
                "max_patterns": 1000,
                "categories": [{"id": 1, "patterns": []}, {"id": 1, "patterns": []}],
            },
        ],
    )
    def test_bad_documents(self, document: object) -> None:
        with pytest.raises(CorruptProfileError):
            decode_profiles(_payload(document))

    def test_error_is_value_error_with_kind(self) -> None:
        with pytest.raises(ValueError) as info:
            decode_profiles(b"garbage")
        assert info.value.kind is ErrorKind.CORRUPT_PROFILE

    def test_target_registry_untouched_on_error(self, registry: ProfileRegistry) -> None:
        document = {
            "max_patterns": 1000,
            "categories": [{"id": 77, "patterns": [["ab", 0]]}, {"id": 78, "patterns": 5}],
        }
        before = registry.profiles()
        with pytest.raises(CorruptProfileError):
            decode_profiles(_payload(document), registry)
        assert registry.profiles() == before
        assert 77 not in registry


class TestFiles:
    """save_profiles / load_profiles."""

    def test_save_and_load(self, registry: ProfileRegistry, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "profiles.tcat"
        save_profiles(registry, path)
        assert path.exists()
        loaded = load_profiles(path)
        assert loaded.profiles() == registry.profiles()

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_profiles(tmp_path / "missing.tcat")

    def test_load_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.tcat"
        path.write_bytes(b"\x00" * 32)
        with pytest.raises(CorruptProfileError):
            load_profiles(path)
