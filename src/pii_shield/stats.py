"""Summary statistics over any entity list."""

from __future__ import annotations
from collections import Counter
from typing import Iterable

from .types import Entity, RedactionStats


def mean_confidence(entities: Iterable[Entity]) -> float:
    """Mean entity confidence; 1.0 when there is nothing to be unsure about."""
    scores = [e.confidence for e in entities]
    if not scores:
        return 1.0
    return sum(scores) / len(scores)


def compute_stats(entities: Iterable[Entity]) -> RedactionStats:
    entities = list(entities)
    by_category = Counter(e.category for e in entities)
    by_type = Counter(e.type.value for e in entities)
    return RedactionStats(
        total_entities=len(entities),
        high_risk=by_category.get("high", 0),
        medium_risk=by_category.get("medium", 0),
        low_risk=by_category.get("low", 0),
        average_confidence=mean_confidence(entities),
        by_type=dict(by_type),
    )
