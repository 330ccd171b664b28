import pytest

from src.domain.phone import normalize_phone


@pytest.mark.parametrize(
    "raw",
    [
        "08123456789",
        "+2348123456789",
        "+234 812 345 6789",
        "2348123456789",
        "002348123456789",
        "(0812) 345-6789",
        "8123456789",
        "+234 (0) 812 345 6789",
        "+23408123456789",
        "0023408123456789",
        "23408123456789",
    ],
)
def test_equivalent_forms_normalize_to_same_number(raw):
    """Different raw strings for the same number must compare equal"""
    assert normalize_phone(raw) == "+2348123456789"


def test_foreign_number_keeps_its_country_code():
    assert normalize_phone("+44 20 7946 0958") == "+442079460958"


def test_custom_default_country_code():
    assert normalize_phone("07946 0958 12", default_country_code="44") == "+447946095812"
    assert normalize_phone("+44 (0)7946 0958 12", default_country_code="44") == "+447946095812"


@pytest.mark.parametrize("raw", ["", "   ", "abc", "+234-81x-3456", "12", "+1234567890123456"])
def test_invalid_numbers_raise_value_error(raw):
    with pytest.raises(ValueError):
        normalize_phone(raw)


def test_none_raises_value_error():
    with pytest.raises(ValueError):
        normalize_phone(None)
