"""Layer 1 — declarative regex rules for structured PII.

Every rule is a row in ``PATTERNS``: entity type, compiled regex, base
confidence, and which capture group holds the value (label-prefixed
rules like ``Routing: 021000021`` report only the number).  Validators
from ``validators.py`` are applied per type, and NAME candidates go
through the context filter in ``names.py``.

Overlaps between *different* types are expected here and left for the
merger.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .names import is_valid_person_name, name_confidence, trim_candidate
from .types import Entity, EntityType
from .validators import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PatternRule:
    """One row of the pattern registry."""
    entity_type: EntityType
    pattern: re.Pattern
    group: int = 0

    @property
    def confidence(self) -> float:
        return self.entity_type.base_confidence


_CITIES = (
    "Springfield|San Diego|Los Angeles|New York|Chicago|Houston|Phoenix|Philadelphia"
    "|San Antonio|Dallas|Detroit|Jacksonville|Memphis|Nashville|Portland|Las Vegas"
    "|Louisville|Baltimore|Milwaukee|Albuquerque|Tucson|Fresno|Sacramento|Kansas City"
    "|Atlanta|Colorado Springs|Omaha|Raleigh|Miami|Long Beach|Minneapolis|Tulsa"
    "|Cleveland|Wichita|Tampa|New Orleans|Honolulu|Anaheim|St\\. Louis|Pittsburgh"
    "|Anchorage|Cincinnati|Toledo|Newark|Buffalo|Orlando|Durham|Madison|Boise"
    "|Richmond|Spokane|Rochester|Des Moines|Tacoma|Salt Lake City|Knoxville"
    "|Providence|Boston|Seattle|Denver|Austin|San Francisco|San Jose|Washington"
    "|Charlotte|Indianapolis|Columbus|Fort Worth|El Paso|Oklahoma City"
)

_HONORIFIC = r"(?:(?:Dr|Mr|Mrs|Ms|Prof)\.?[ \t]+|Miss[ \t]+)"
_NAME_WORD = r"[A-Z][a-z]{2,15}"
_STREET_SUFFIX = (
    r"(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct"
    r"|Place|Pl|Way|Circle|Cir)"
)

NAME_PATTERN = re.compile(
    rf"\b{_HONORIFIC}?{_NAME_WORD}[ \t]+{_NAME_WORD}(?:[ \t]+{_NAME_WORD})?\b"
)

PATTERNS: list[PatternRule] = [
    PatternRule(EntityType.EMAIL, re.compile(
        r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?"
        r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?)*\.[A-Za-z]{2,}\b"
    )),

    # North American formats, optional +1 and parenthesised area code
    PatternRule(EntityType.PHONE, re.compile(
        r"(?<![\w+])(?:\+?1[\s\-.]?)?(?:\(\d{3}\)|\d{3})[\s\-.]?\d{3}[\s\-.]?\d{4}\b"
    )),

    # Separators must be consistent: 123-45-6789 or 123 45 6789
    PatternRule(EntityType.SSN, re.compile(
        r"\b\d{3}([\-. ])\d{2}\1\d{4}\b"
    )),

    # Visa, MC (incl. 2-series), Amex, Discover with optional separators
    PatternRule(EntityType.CREDIT_CARD, re.compile(
        r"\b(?:4\d{3}|5[1-5]\d{2}|2[2-7]\d{2}|3[47]\d{2}|6(?:011|5\d{2}))"
        r"[\s\-]?\d{4}[\s\-]?\d{4}[\s\-]?\d{1,4}\b"
    )),

    PatternRule(EntityType.IBAN, re.compile(
        r"\b[A-Z]{2}\d{2}(?: ?[A-Z0-9]{4}){2,7}(?: ?[A-Z0-9]{1,4})?\b"
    )),

    PatternRule(EntityType.ROUTING_NUMBER, re.compile(
        r"\b(?:Routing|ABA)(?:\s+(?:No\.?|Number|#))?[:\s#]*(\d{9})\b", re.IGNORECASE
    ), group=1),

    PatternRule(EntityType.TAX_ID, re.compile(
        r"\b(?:TIN|EIN|Tax\s*ID)[:\s#]*(\d{2}-\d{7})\b", re.IGNORECASE
    ), group=1),

    PatternRule(EntityType.MEDICAL_RECORD, re.compile(
        r"\b(?:MRN|Medical\s+Record(?:\s+(?:No\.?|Number|#))?)[:\s#]*"
        r"((?=[A-Z]*\d)[A-Z0-9]{6,15})\b", re.IGNORECASE
    ), group=1),

    PatternRule(EntityType.PASSPORT, re.compile(
        r"\b[A-Z]{1,2}\d{6,9}\b"
    )),

    PatternRule(EntityType.DRIVERS_LICENSE, re.compile(
        r"\b[A-Z]{1,2}\d{6,8}\b|\b\d{8,10}\b"
    )),

    PatternRule(EntityType.BANK_ACCOUNT, re.compile(
        r"\b\d{8,17}\b"
    )),

    PatternRule(EntityType.NAME, NAME_PATTERN),

    PatternRule(EntityType.EMPLOYEE_ID, re.compile(r"\bEMP-\d{4,6}\b")),

    PatternRule(EntityType.LIBRARY_CARD_ID, re.compile(r"\bLC-\d{6}\b")),

    # @handles, or identifiers mixing letters with digits
    PatternRule(EntityType.USERNAME, re.compile(
        r"(?<![\w.@])@[A-Za-z0-9_]{3,20}\b|\b[a-zA-Z][a-zA-Z0-9_]*\d+[a-zA-Z0-9_]*\b"
    )),

    PatternRule(EntityType.ADDRESS, re.compile(
        r"\b\d{1,3}(?:st|nd|rd|th)?[ \t]+(?:Floor|Fl|Level),?[ \t]*"
        r"(?:[A-Z][A-Za-z0-9]*[ \t]+){1,4}(?:Tower|Building|Bldg)\b"
        rf"|\b\d{{1,6}}[ \t]+(?:[A-Z][A-Za-z0-9]*\.?[ \t]+){{1,4}}{_STREET_SUFFIX}\b"
    )),

    PatternRule(EntityType.LOCATION, re.compile(
        r"\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*,[ \t]*[A-Z]{2}\b"
        rf"|\b(?:{_CITIES})\b"
    )),

    PatternRule(EntityType.DATE_OF_BIRTH, re.compile(
        r"\b(?:0[1-9]|1[0-2])[\-/.](?:0[1-9]|[12]\d|3[01])[\-/.]\d{4}\b"
        r"|\b(?:0[1-9]|[12]\d|3[01])[\-/.](?:0[1-9]|1[0-2])[\-/.]\d{4}\b"
    )),

    PatternRule(EntityType.IP_ADDRESS, re.compile(
        r"\b(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\.){3}"
        r"(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\b"
    )),

    PatternRule(EntityType.MAC_ADDRESS, re.compile(
        r"\b(?:[0-9A-Fa-f]{2}[:\-]){5}[0-9A-Fa-f]{2}\b"
    )),
]


def scan_regex(
    text: str,
    enabled_types: Iterable[EntityType] | None = None,
) -> list[Entity]:
    """Run every registered rule over text.

    Returns validated candidates sorted by start.  Candidates of
    different types may overlap.
    """
    if not text:
        return []

    wanted = set(enabled_types) if enabled_types is not None else None
    matches: list[Entity] = []
    for rule in PATTERNS:
        if wanted is not None and rule.entity_type not in wanted:
            continue
        if rule.entity_type is EntityType.NAME:
            matches.extend(_scan_names(text, rule))
            continue

        for m in rule.pattern.finditer(text):
            value = m.group(rule.group)
            if not value or not validate(rule.entity_type, value):
                continue
            matches.append(Entity.create(
                rule.entity_type,
                value,
                m.start(rule.group),
                m.end(rule.group),
                rule.confidence,
            ))

    logger.debug("regex layer: %d candidates", len(matches))
    return sorted(matches, key=lambda e: e.start)


def _scan_names(text: str, rule: PatternRule) -> list[Entity]:
    """Scan for names, re-trying from the next word after a rejection.

    A run like "Please Call John Smith" first matches three words; when
    that is rejected the search resumes at "Call" so "John Smith" still
    gets a chance.
    """
    found: list[Entity] = []
    pos = 0
    while True:
        m = rule.pattern.search(text, pos)
        if m is None:
            break

        span = trim_candidate(text, m.start(), m.end())
        if span is not None:
            start, end = span
            name = text[start:end]
            if is_valid_person_name(name, text, start):
                found.append(Entity.create(
                    rule.entity_type,
                    name,
                    start,
                    end,
                    name_confidence(name, rule.confidence),
                ))
                pos = end
                continue

        # resume at the second word of the rejected match
        second = re.search(r"\s+\S", text[m.start():m.end()])
        pos = m.start() + second.end() - 1 if second else m.end()
    return found
