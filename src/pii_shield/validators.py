"""Structural and checksum validators for raw pattern matches.

A validator takes the matched text and returns True to keep the
candidate.  They never raise: garbage in simply means False.
"""

from __future__ import annotations
import re
from typing import Callable

from .types import EntityType

_NON_DIGIT = re.compile(r"\D")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")

Validator = Callable[[str], bool]


def _digits(value: str) -> str:
    return _NON_DIGIT.sub("", value)


def luhn_checksum(card_number: str) -> bool:
    """Validate a payment card number with the Luhn algorithm."""
    digits = _digits(card_number)
    if len(digits) < 13 or len(digits) > 19:
        return False

    total = 0
    for i, ch in enumerate(reversed(digits)):
        digit = int(ch)
        if i % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def valid_ssn(ssn: str) -> bool:
    """Reject SSNs with reserved area, group or serial segments."""
    digits = _digits(ssn)
    if len(digits) != 9:
        return False

    area, group, serial = digits[:3], digits[3:5], digits[5:]
    if area in ("000", "666") or area.startswith("9"):
        return False
    if group == "00" or serial == "0000":
        return False
    return True


def valid_routing_number(number: str) -> bool:
    """ABA routing number: 9 digits, weighted 3-7-1 checksum."""
    digits = _digits(number)
    if len(digits) != 9:
        return False
    weights = (3, 7, 1) * 3
    return sum(int(d) * w for d, w in zip(digits, weights)) % 10 == 0


def valid_iban(iban: str) -> bool:
    """ISO 13616 IBAN check (mod-97 == 1)."""
    value = _NON_ALNUM.sub("", iban).upper()
    if len(value) < 15 or len(value) > 34:
        return False
    if not (value[:2].isalpha() and value[2:4].isdigit()):
        return False

    rearranged = value[4:] + value[:4]
    # A=10 .. Z=35
    numeric = "".join(str(int(ch, 36)) for ch in rearranged)
    return int(numeric) % 97 == 1


VALIDATORS: dict[EntityType, Validator] = {
    EntityType.CREDIT_CARD: luhn_checksum,
    EntityType.SSN: valid_ssn,
    EntityType.ROUTING_NUMBER: valid_routing_number,
    EntityType.IBAN: valid_iban,
}


def validate(entity_type: EntityType, text: str) -> bool:
    """Run the registered validator for a type; unvalidated types pass."""
    validator = VALIDATORS.get(entity_type)
    if validator is None:
        return True
    try:
        return validator(text)
    except ValueError:
        return False
