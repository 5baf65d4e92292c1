"""Tests for entity statistics."""

import pytest

from pii_shield.stats import compute_stats, mean_confidence
from pii_shield.types import Entity, EntityType, risk_category


def test_risk_category_boundaries():
    assert risk_category(0.9) == "high"
    assert risk_category(0.8999) == "medium"
    assert risk_category(0.8) == "medium"
    assert risk_category(0.72) == "low"


def test_empty_stats():
    stats = compute_stats([])
    assert stats.total_entities == 0
    assert stats.average_confidence == 1.0
    assert stats.by_type == {}
    assert mean_confidence([]) == 1.0


def test_counts_by_category_and_type():
    entities = [
        Entity.create(EntityType.EMAIL, "a@b.co", 0, 6),
        Entity.create(EntityType.EMAIL, "c@d.co", 10, 16),
        Entity.create(EntityType.PASSPORT, "X1234567", 20, 28),
        Entity.create(EntityType.USERNAME, "bob99", 30, 35),
    ]
    stats = compute_stats(entities)
    assert stats.total_entities == 4
    assert stats.by_category == {"high": 2, "medium": 1, "low": 1}
    assert stats.by_type == {"EMAIL": 2, "PASSPORT": 1, "USERNAME": 1}
    assert stats.average_confidence == pytest.approx((0.98 + 0.98 + 0.85 + 0.72) / 4)


def test_stats_to_dict():
    d = compute_stats([Entity.create(EntityType.SSN, "123-45-6789", 0, 11)]).to_dict()
    assert d == {
        "totalEntities": 1,
        "highRiskEntities": 1,
        "mediumRiskEntities": 0,
        "lowRiskEntities": 0,
        "averageConfidence": 0.99,
        "entitiesByType": {"SSN": 1},
    }


def test_confidence_is_clamped():
    assert Entity.create(EntityType.NAME, "x", 0, 1, 1.7).confidence == 1.0
    assert Entity.create(EntityType.NAME, "x", 0, 1, -0.2).category == "low"
