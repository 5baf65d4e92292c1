"""Redaction strategies — how a single entity span gets replaced.

Each strategy is a function ``(entity, seq, options) -> str`` where
``seq`` is the entity's 1-based position among entities of the same
type.  Strategies are looked up by id or by the product label shown
in the UI ("Smart Placeholders", "Contextual Masking", ...).
"""

from __future__ import annotations
import hashlib
import re
import secrets
import string
from dataclasses import dataclass
from typing import Callable

from .exceptions import UnknownStrategyError
from .types import Entity, EntityType

MASK_CHAR = "*"
MASK_CAP = 8
BLOCK_CHAR = "█"
BLOCK_CAP = 12
TOKEN_LENGTH = 8

_TOKEN_ALPHABET = string.ascii_uppercase + string.digits

_NUMERIC_TYPES = {
    EntityType.SSN, EntityType.CREDIT_CARD, EntityType.PHONE, EntityType.BANK_ACCOUNT,
    EntityType.ROUTING_NUMBER, EntityType.TAX_ID, EntityType.DRIVERS_LICENSE,
    EntityType.PASSPORT, EntityType.IBAN, EntityType.EMPLOYEE_ID,
    EntityType.LIBRARY_CARD_ID, EntityType.MEDICAL_RECORD,
}


@dataclass(frozen=True, slots=True)
class StrategyOptions:
    """Knobs shared by all strategies."""
    placeholder_width: int = 1
    hash_salt: str = ""


ReplaceFn = Callable[[Entity, int, StrategyOptions], str]


# ── Simple strategies ────────────────────────────────────────────────

def placeholder(entity: Entity, seq: int, options: StrategyOptions) -> str:
    return f"[{entity.type.value}_{seq:0{options.placeholder_width}d}]"


def removal(entity: Entity, seq: int, options: StrategyOptions) -> str:
    return ""


def tokenization(entity: Entity, seq: int, options: StrategyOptions) -> str:
    suffix = "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return f"TOKEN_{suffix}"


def masking(entity: Entity, seq: int, options: StrategyOptions) -> str:
    return MASK_CHAR * min(len(entity.text), MASK_CAP)


def crypto_hash(entity: Entity, seq: int, options: StrategyOptions) -> str:
    digest = hashlib.sha256(
        (options.hash_salt + entity.text).encode("utf-8")
    ).hexdigest()
    return f"[HASH_{entity.type.value}_{digest[:8].upper()}]"


# ── Contextual masking ───────────────────────────────────────────────

def _mask_word(word: str) -> str:
    """Keep first and last character, block out the middle."""
    if len(word) <= 2:
        return word[:1] + BLOCK_CHAR * (len(word) - 1)
    return word[0] + BLOCK_CHAR * (len(word) - 2) + word[-1]


def _keep_last_digits(text: str, keep: int = 4) -> str:
    """Replace every digit but the last ``keep`` with X, keeping separators."""
    total = sum(ch.isdigit() for ch in text)
    out: list[str] = []
    seen = 0
    for ch in text:
        if ch.isalnum():
            seen += ch.isdigit()
            if ch.isdigit() and seen > total - keep:
                out.append(ch)
            else:
                out.append("X")
        else:
            out.append(ch)
    return "".join(out)


def contextual_masking(entity: Entity, seq: int, options: StrategyOptions) -> str:
    text = entity.text
    etype = entity.type

    if etype is EntityType.NAME:
        return re.sub(r"[A-Za-z]+", lambda m: _mask_word(m.group()), text)

    if etype is EntityType.EMAIL and "@" in text:
        local, domain = text.rsplit("@", 1)
        if len(local) > 2:
            local = local[0] + BLOCK_CHAR * (len(local) - 2) + local[-1]
        else:
            local = BLOCK_CHAR * len(local)
        return f"{local}@{domain}"

    if etype in _NUMERIC_TYPES and sum(ch.isdigit() for ch in text) > 4:
        return _keep_last_digits(text)

    if etype is EntityType.IP_ADDRESS:
        octets = text.split(".")
        return ".".join(octets[:2] + ["XXX"] * (len(octets) - 2))

    if etype is EntityType.ADDRESS:
        head, _, rest = text.partition(" ")
        return "X" * len(head) + (" " + rest if rest else "")

    return BLOCK_CHAR * min(len(text), BLOCK_CAP)


# ── Partial visibility ───────────────────────────────────────────────

def partial_visibility(entity: Entity, seq: int, options: StrategyOptions) -> str:
    text = entity.text
    etype = entity.type

    if etype is EntityType.EMAIL and "@" in text:
        local, domain = text.rsplit("@", 1)
        return local[:2] + "***@" + domain
    if etype is EntityType.PHONE:
        return "***-***-" + text[-4:]
    if etype is EntityType.NAME:
        parts = text.split()
        if len(parts) > 1:
            return " ".join([parts[0]] + [p[0] + "***" for p in parts[1:]])
    if etype is EntityType.ADDRESS:
        parts = text.split()
        return "*** " + " ".join(parts[-2:])
    if len(text) <= 4:
        return "*" * len(text)
    return text[:2] + "***" + text[-2:]


# ── Synthetic data ───────────────────────────────────────────────────

SYNTHETIC_VALUES: dict[EntityType, tuple[str, ...]] = {
    EntityType.NAME: (
        "John Smith", "Jane Doe", "Michael Johnson", "Sarah Wilson",
        "David Brown", "Lisa Garcia", "Robert Miller", "Emily Davis",
        "William Anderson", "Jessica Moore", "James Taylor", "Ashley Thomas",
    ),
    EntityType.EMAIL: (
        "user@example.com", "contact@company.org", "info@business.net",
        "admin@enterprise.com", "support@service.co", "hello@startup.io",
    ),
    EntityType.PHONE: (
        "(555) 123-4567", "(555) 987-6543", "(555) 456-7890",
        "(555) 321-9876", "(555) 654-3210", "(555) 789-0123",
    ),
    EntityType.ADDRESS: (
        "123 Main Street", "456 Oak Avenue", "789 Pine Road",
        "321 Elm Drive", "654 Maple Lane", "987 Cedar Court",
    ),
    EntityType.SSN: ("123-45-6789", "987-65-4321", "456-78-9012"),
    EntityType.CREDIT_CARD: ("4111111111111111", "5555555555554444", "378282246310005"),
    EntityType.IP_ADDRESS: ("192.168.1.100", "10.0.0.50", "172.16.0.200"),
    EntityType.LOCATION: ("Springfield", "Riverside", "Fairview", "Greenville"),
    EntityType.DATE_OF_BIRTH: ("01/01/1970", "06/15/1985", "12/31/1990"),
}


def synthetic(entity: Entity, seq: int, options: StrategyOptions) -> str:
    values = SYNTHETIC_VALUES.get(entity.type)
    if not values:
        return f"[SYNTHETIC_{entity.type.value}]"
    return values[(seq - 1) % len(values)]


# ── Registry ─────────────────────────────────────────────────────────

STRATEGIES: dict[str, ReplaceFn] = {
    "placeholder": placeholder,
    "removal": removal,
    "tokenization": tokenization,
    "masking": masking,
    "contextual_masking": contextual_masking,
    "synthetic": synthetic,
    "hash": crypto_hash,
    "partial": partial_visibility,
}

# Product labels and loose spellings -> canonical id
ALIASES: dict[str, str] = {
    "smart_placeholders": "placeholder",
    "placeholders": "placeholder",
    "complete_removal": "removal",
    "remove": "removal",
    "tokenize": "tokenization",
    "mask": "masking",
    "partial_masking": "masking",
    "contextual": "contextual_masking",
    "synthetic_data": "synthetic",
    "cryptographic_hash": "hash",
    "partial_visibility": "partial",
}

LABELS: dict[str, str] = {
    "placeholder": "Smart Placeholders",
    "removal": "Complete Removal",
    "tokenization": "Tokenization",
    "masking": "Masking",
    "contextual_masking": "Contextual Masking",
    "synthetic": "Synthetic Data",
    "hash": "Cryptographic Hash",
    "partial": "Partial Visibility",
}


def normalize_strategy(name: str) -> str:
    """Map an id or UI label to its canonical strategy id.

    Raises UnknownStrategyError for anything unrecognized.
    """
    key = re.sub(r"[\s\-]+", "_", str(name).strip().lower())
    key = ALIASES.get(key, key)
    if key not in STRATEGIES:
        raise UnknownStrategyError(str(name), sorted(STRATEGIES))
    return key


def get_strategy(name: str) -> ReplaceFn:
    return STRATEGIES[normalize_strategy(name)]
