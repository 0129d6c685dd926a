from __future__ import annotations

"""Diagnosis scoring: compare a player's flagged concerns with the ground truth."""

from typing import Dict, Iterable, List

from reality_check.logging_config import get_logger
from reality_check.models.domain import ConcernResult, Feedback
from reality_check.simulation.concerns import CONCERN_IDS
from reality_check.simulation.engine import round_half_up

logger = get_logger(__name__)

STRONG_SCORE = 80
PARTIAL_SCORE = 60


def _ordered(ids: Iterable[str]) -> List[str]:
    """Catalogue order first, then any unknown ids alphabetically."""
    position = {cid: i for i, cid in enumerate(CONCERN_IDS)}
    return sorted(set(ids), key=lambda cid: (position.get(cid, len(position)), cid))


def grade_for(score_pct: int) -> str:
    """Feedback band for a score percentage: strong, partial, or needs_work."""
    if score_pct >= STRONG_SCORE:
        return "strong"
    if score_pct >= PARTIAL_SCORE:
        return "partial"
    return "needs_work"


def score(
    truth_ids: Iterable[str],
    selected_ids: Iterable[str],
    all_concerns: List[ConcernResult],
) -> Feedback:
    """Score a diagnosis with set semantics.

    Order and duplicates in either id list do not matter. Missed concerns are
    resolved to full results from ``all_concerns``; false positives stay as
    ids, and their display entries are resolved the same way, skipping ids
    that match nothing. A round with no true concerns and no selections
    scores 100.
    """
    truth = set(truth_ids)
    selected = set(selected_ids)
    by_id: Dict[str, ConcernResult] = {c.id: c for c in all_concerns}

    correct = len(selected & truth)
    missed_ids = _ordered(truth - selected)
    false_positive_ids = _ordered(selected - truth)
    score_pct = int(round_half_up(correct / max(1, len(truth)) * 100))

    feedback = Feedback(
        correct_identifications=correct,
        total_concerns=len(truth),
        missed_concerns=[by_id[cid] for cid in missed_ids if cid in by_id],
        false_positives=false_positive_ids,
        false_positive_details=[by_id[cid] for cid in false_positive_ids if cid in by_id],
        score=score_pct,
        grade=grade_for(score_pct),
        caught_all=len(truth) > 0 and correct == len(truth),
    )
    logger.debug("Scored diagnosis: %s/%s correct, score %s", correct, len(truth), score_pct)
    return feedback
