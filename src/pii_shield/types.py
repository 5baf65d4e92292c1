"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EntityType(str, Enum):
    """Closed set of PII types the engine can report."""
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    SSN = "SSN"
    CREDIT_CARD = "CREDIT_CARD"
    PASSPORT = "PASSPORT"
    DRIVERS_LICENSE = "DRIVERS_LICENSE"
    BANK_ACCOUNT = "BANK_ACCOUNT"
    NAME = "NAME"
    ADDRESS = "ADDRESS"
    LOCATION = "LOCATION"
    DATE_OF_BIRTH = "DATE_OF_BIRTH"
    USERNAME = "USERNAME"
    EMPLOYEE_ID = "EMPLOYEE_ID"
    LIBRARY_CARD_ID = "LIBRARY_CARD_ID"
    IP_ADDRESS = "IP_ADDRESS"
    MAC_ADDRESS = "MAC_ADDRESS"
    IBAN = "IBAN"
    ROUTING_NUMBER = "ROUTING_NUMBER"
    TAX_ID = "TAX_ID"
    MEDICAL_RECORD = "MEDICAL_RECORD"

    def __str__(self) -> str:
        return self.value

    @property
    def base_confidence(self) -> float:
        return BASE_CONFIDENCE[self]


BASE_CONFIDENCE: dict[EntityType, float] = {
    EntityType.EMAIL: 0.98,
    EntityType.PHONE: 0.95,
    EntityType.SSN: 0.99,
    EntityType.CREDIT_CARD: 0.97,
    EntityType.PASSPORT: 0.85,
    EntityType.DRIVERS_LICENSE: 0.80,
    EntityType.BANK_ACCOUNT: 0.75,
    EntityType.NAME: 0.90,
    EntityType.ADDRESS: 0.85,
    EntityType.LOCATION: 0.90,
    EntityType.DATE_OF_BIRTH: 0.90,
    EntityType.USERNAME: 0.72,
    EntityType.EMPLOYEE_ID: 0.95,
    EntityType.LIBRARY_CARD_ID: 0.95,
    EntityType.IP_ADDRESS: 0.90,
    EntityType.MAC_ADDRESS: 0.93,
    EntityType.IBAN: 0.93,
    EntityType.ROUTING_NUMBER: 0.95,
    EntityType.TAX_ID: 0.92,
    EntityType.MEDICAL_RECORD: 0.92,
}

HIGH_RISK_THRESHOLD = 0.9
MEDIUM_RISK_THRESHOLD = 0.8


def risk_category(confidence: float) -> str:
    """Bucket a confidence into "high" / "medium" / "low"."""
    if confidence >= HIGH_RISK_THRESHOLD:
        return "high"
    if confidence >= MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "low"


@dataclass(frozen=True, slots=True)
class Entity:
    """A single detected PII span.

    Offsets are half-open and index the original text.
    """
    type: EntityType
    text: str
    start: int
    end: int
    confidence: float      # 0.0–1.0
    category: str          # "high" | "medium" | "low"
    source: str = "regex"  # "regex" | "presidio" | "custom"

    @classmethod
    def create(
        cls,
        entity_type: EntityType,
        text: str,
        start: int,
        end: int,
        confidence: float | None = None,
        *,
        source: str = "regex",
    ) -> Entity:
        """Build an entity, deriving the risk category from its confidence."""
        if confidence is None:
            confidence = entity_type.base_confidence
        confidence = max(0.0, min(1.0, float(confidence)))
        return cls(
            type=entity_type,
            text=text,
            start=start,
            end=end,
            confidence=confidence,
            category=risk_category(confidence),
            source=source,
        )

    def overlaps(self, other: Entity) -> bool:
        return self.start < other.end and other.start < self.end

    def to_record(self) -> dict[str, Any]:
        """Export shape consumed by storage and report generators."""
        return {
            "type": self.type.value,
            "text": self.text,
            "start": self.start,
            "end": self.end,
            "confidence": self.confidence,
            "category": self.category,
        }


@dataclass(frozen=True, slots=True)
class RedactionStats:
    """Summary counts derived from an entity list."""
    total_entities: int = 0
    high_risk: int = 0
    medium_risk: int = 0
    low_risk: int = 0
    average_confidence: float = 1.0
    by_type: dict[str, int] = field(default_factory=dict)

    @property
    def by_category(self) -> dict[str, int]:
        return {"high": self.high_risk, "medium": self.medium_risk, "low": self.low_risk}

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalEntities": self.total_entities,
            "highRiskEntities": self.high_risk,
            "mediumRiskEntities": self.medium_risk,
            "lowRiskEntities": self.low_risk,
            "averageConfidence": self.average_confidence,
            "entitiesByType": dict(self.by_type),
        }


@dataclass(frozen=True, slots=True)
class RedactionResult:
    """Result of one detect-and-redact request."""
    original_text: str
    redacted_text: str
    entities: tuple[Entity, ...] = ()
    strategy: str = "placeholder"
    confidence: float = 1.0              # mean entity confidence
    stats: RedactionStats = field(default_factory=RedactionStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalText": self.original_text,
            "redactedText": self.redacted_text,
            "entities": [e.to_record() for e in self.entities],
            "method": self.strategy,
            "confidence": self.confidence,
            "totalEntities": self.stats.total_entities,
            "entityCounts": {k: v for k, v in self.stats.by_category.items() if v},
            "stats": self.stats.to_dict(),
        }
