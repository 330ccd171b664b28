"""
Phone number normalization.

Visitors and bans are keyed by phone, so every raw string is reduced to one
canonical ``+<country><number>`` form before it is stored or compared.
"""

import re

_FORMATTING = re.compile(r"[\s\-().]")
_DIGITS = re.compile(r"^\+?\d+$")

MIN_DIGITS = 8
MAX_DIGITS = 15


def normalize_phone(raw: str, default_country_code: str = "234") -> str:
    """
    Normalize a phone number to an E.164-like string.

    Examples (default country 234):
        "08123456789"      -> "+2348123456789"
        "+234 812 345 6789" -> "+2348123456789"
        "002348123456789"  -> "+2348123456789"
        "2348123456789"    -> "+2348123456789"
        "+234 (0) 812 345 6789" -> "+2348123456789"

    Raises:
        ValueError: if the input does not look like a phone number
    """
    if raw is None:
        raise ValueError("Phone number is required")

    value = _FORMATTING.sub("", str(raw).strip())
    if not value:
        raise ValueError("Phone number is required")
    if not _DIGITS.match(value):
        raise ValueError(f"Invalid phone number: {raw}")

    if value.startswith("+"):
        digits = value[1:]
    elif value.startswith("00"):
        digits = value[2:]
    elif value.startswith("0"):
        digits = default_country_code + value[1:]
    elif value.startswith(default_country_code) and len(value) > len(default_country_code) + 7:
        digits = value
    else:
        digits = default_country_code + value

    # Trunk zero written after the country code, e.g. "+234 (0) 812..."
    trunk = default_country_code + "0"
    if digits.startswith(trunk):
        digits = default_country_code + digits[len(trunk):]

    if len(digits) < MIN_DIGITS or len(digits) > MAX_DIGITS:
        raise ValueError(f"Invalid phone number length: {raw}")

    return f"+{digits}"
