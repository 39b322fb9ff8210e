"""Phone number normalization.

Numbers are stored as '+' followed by country code and subscriber digits.
Local numbers (leading 0 or no country code) get the default country code.
"""

import re

_NON_DIGIT = re.compile(r"\D")
_PHONE_LIKE = re.compile(r"^\+?[\d\s().-]+$")


def looks_like_phone(value: str) -> bool:
    return bool(_PHONE_LIKE.match(value.strip()))


def normalize_phone_number(phone: str, country_code: str = "251") -> str:
    """Return phone as +<country><number>.

    Raises:
        ValueError: If there are too few or too many digits.
    """
    digits = _NON_DIGIT.sub("", phone)
    if not digits.startswith(country_code):
        digits = country_code + digits.removeprefix("0")
    subscriber = digits[len(country_code):]
    if not 7 <= len(subscriber) <= 12:
        raise ValueError("Invalid phone number")
    return f"+{digits}"
