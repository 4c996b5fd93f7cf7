"""Testes do LibPhoneNumberNormalizer (phonenumbers)."""

from __future__ import annotations

import pytest

from app.infra.whatsapp import LibPhoneNumberNormalizer


@pytest.fixture
def normalizer() -> LibPhoneNumberNormalizer:
    return LibPhoneNumberNormalizer("PK")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("03001234567", "923001234567"),
        ("0300 1234567", "923001234567"),
        ("+92 300 1234567", "923001234567"),
        ("=03001234567", "923001234567"),
        ("  +1 (202) 456-1111 ", "12024561111"),
    ],
)
def test_normalizes_to_e164_without_plus(
    normalizer: LibPhoneNumberNormalizer, raw: str, expected: str
) -> None:
    assert normalizer.normalize(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "=", "abc", "123", "0300"])
def test_invalid_numbers_return_none(normalizer: LibPhoneNumberNormalizer, raw: str) -> None:
    assert normalizer.normalize(raw) is None


def test_default_region_is_configurable() -> None:
    normalizer = LibPhoneNumberNormalizer("us")

    assert normalizer.default_region == "US"
    assert normalizer.normalize("(202) 456-1111") == "12024561111"
