"""Tests for text normalization and fuzzy matching."""

import pytest

from src.services.text.normalizer import normalize
from src.services.text.similarity import distance, is_similar


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("iPhone 16 Pro!", "iphone 16 pro"),
        ("  Café   Crème  ", "cafe creme"),
        ("Видеокарты,  MSI/RTX-4070", "видеокарты msi rtx 4070"),
        ("ＡＢＣ１２３", "abc123"),
        ("be quiet!", "be quiet"),
        ("---", ""),
    ],
)
def test_normalize_canonicalizes_text(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.unit
@pytest.mark.parametrize("raw", [None, "", "   "])
def test_normalize_accepts_empty_input(raw):
    assert normalize(raw) == ""


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    ["Ёлка Йога", "Crème brûlée №5", "GeForce® RTX™ 4060 Ti", "ℍello\tWorld"],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


@pytest.mark.unit
def test_distance_basic_properties():
    assert distance("kitten", "kitten") == 0
    assert distance("kitten", "sitting") == 3
    assert distance("sitting", "kitten") == 3
    assert distance("", "abc") == 3
    assert distance("abc", "") == 3
    assert distance("видеокарта", "видеокарты") == 1


@pytest.mark.unit
def test_is_similar_rejects_two_empty_strings():
    assert is_similar("", "") is False


@pytest.mark.unit
def test_is_similar_accepts_identical_and_close_strings():
    assert is_similar("iphone", "iphone") is True
    assert is_similar("deepcool cc560", "deepcol cc560") is True
    assert is_similar("видеокарты", "видеокарта") is True


@pytest.mark.unit
def test_is_similar_rejects_distant_strings():
    assert is_similar("процессоры", "корпуса") is False
    assert is_similar("", "abc") is False
    assert is_similar("iphone 16 pro 256gb black", "iphone 16 pro") is False


@pytest.mark.unit
def test_is_similar_threshold_is_strict():
    # one edit out of four characters is exactly 0.25
    assert is_similar("abcd", "abce") is False
    assert is_similar("abcd", "abce", threshold=0.26) is True
