"""Cross-layer span merging.

Pattern-based and model-based entities are combined into one
start-ordered list in which no two spans overlap.  When two spans
overlap the higher confidence wins; on a tie the one inserted first
(pattern layer before model layer) is kept.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable

from .types import Entity

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MergeOutcome:
    """Every candidate ends up in exactly one of these lists."""
    kept: list[Entity] = field(default_factory=list)
    superseded: list[Entity] = field(default_factory=list)


def resolve_overlaps(candidates: Iterable[Entity]) -> MergeOutcome:
    """Walk candidates by start, keeping the best of each overlapping group."""
    # sorted() is stable, so equal starts keep insertion order
    ordered = sorted(candidates, key=lambda e: e.start)
    outcome = MergeOutcome()
    kept = outcome.kept

    for cand in ordered:
        rivals = [e for e in kept if e.overlaps(cand)]
        if not rivals:
            kept.append(cand)
            continue

        if all(cand.confidence > r.confidence for r in rivals):
            for r in rivals:
                kept.remove(r)
                outcome.superseded.append(r)
            kept.append(cand)
            kept.sort(key=lambda e: e.start)
        else:
            outcome.superseded.append(cand)

    return outcome


def merge_entities(*sources: Iterable[Entity]) -> list[Entity]:
    """Merge entity lists into the canonical non-overlapping list.

    Sources are concatenated in argument order, which decides ties.
    """
    candidates: list[Entity] = []
    for source in sources:
        candidates.extend(source)

    outcome = resolve_overlaps(candidates)
    if outcome.superseded:
        logger.debug(
            "merge: kept %d, superseded %d", len(outcome.kept), len(outcome.superseded)
        )
    return outcome.kept
