# -*- coding: utf-8 -*-
"""
Swap acceptance policy shared by every local-search strategy.

A move is evaluated on the two machines it touches only:
  (score, overallocation deviation, overloaded?) before vs. after.

Decision rule, first match wins:
  1) baseline overloaded, candidate not          -> accept
  2) baseline not overloaded, candidate is       -> reject
  3) neither overloaded                          -> accept iff score drops
  4) both overloaded and the overallocation
     deviation moves by more than the threshold  -> accept iff deviation drops
  5) otherwise                                   -> accept iff score drops
"""

from __future__ import annotations
from dataclasses import dataclass

from mpls.planning.state import AllocationState
from mpls.quality_metrics.core import (
    is_pair_overloaded,
    pairwise_overallocation_deviation,
    pairwise_variance_coefficient,
)

OVERALLOCATION_THRESHOLD = 1.0


@dataclass(frozen=True)
class SwapEvaluation:
    """Local view of a machine pair used to compare a move against the status quo."""
    score: float
    overallocation_deviation: float
    overloaded: bool


def evaluate_pair(state: AllocationState, a: int, b: int) -> SwapEvaluation:
    return SwapEvaluation(
        score=pairwise_variance_coefficient(state, a, b),
        overallocation_deviation=pairwise_overallocation_deviation(state, a, b),
        overloaded=is_pair_overloaded(state, a, b),
    )


def should_accept(
    baseline: SwapEvaluation,
    candidate: SwapEvaluation,
    threshold: float = OVERALLOCATION_THRESHOLD,
) -> bool:
    """True if `candidate` should replace `baseline` (NaN scores never win)."""
    if baseline.overloaded and not candidate.overloaded:
        return True

    if not baseline.overloaded and candidate.overloaded:
        return False

    if not baseline.overloaded and not candidate.overloaded:
        return candidate.score < baseline.score

    if abs(baseline.overallocation_deviation - candidate.overallocation_deviation) > threshold:
        return candidate.overallocation_deviation < baseline.overallocation_deviation

    return candidate.score < baseline.score
