import pytest

from portal.shared.utils.phone import looks_like_phone, normalize_phone_number


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0911234567", "+251911234567"),
        ("911234567", "+251911234567"),
        ("+251 911 234 567", "+251911234567"),
        ("251-911-234-567", "+251911234567"),
    ],
)
def test_normalize_phone_number(raw, expected) -> None:
    assert normalize_phone_number(raw) == expected


def test_normalize_phone_number_other_country_code() -> None:
    assert normalize_phone_number("0712345678", country_code="254") == "+254712345678"


@pytest.mark.parametrize("raw", ["12345", "0911", "+251 1234567890123"])
def test_normalize_phone_number_rejects_bad_length(raw) -> None:
    with pytest.raises(ValueError):
        normalize_phone_number(raw)


def test_looks_like_phone() -> None:
    assert looks_like_phone("+251 (911) 234-567")
    assert not looks_like_phone("abebe")
    assert not looks_like_phone("abebe99")
