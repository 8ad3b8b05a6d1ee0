# -*- coding: utf-8 -*-
"""
Initial placement strategies. Each one loads its result into the given
AllocationState and returns nothing unless noted.

  1) generate_samples            best of N random placements (lowest variance)
  2) greedy_allocation           per container, the machines with most headroom
  3) greedy_over_initial_state   keep the caller's placement, top up greedily

All strategies place at most one instance of a container spec per machine.
"""

from __future__ import annotations
import logging
import math
from typing import Optional, Sequence

import numpy as np

from mpls.planning.state import AllocationState
from mpls.planning.termination import StopCondition
from mpls.quality_metrics.core import compute_variance
from mpls.utils.arrays import random_binary_array

logger = logging.getLogger(__name__)


def generate_sample(rows: int, desired: Sequence[int], rng: np.random.Generator) -> np.ndarray:
    """One random matrix whose column j holds exactly desired[j] ones."""
    sample = np.zeros((rows, len(desired)), dtype=np.int8)
    for j, count in enumerate(desired):
        sample[:, j] = random_binary_array(rows, int(count), rng)
    return sample


def generate_samples(
    state: AllocationState,
    desired: Sequence[int],
    iterations: int,
    rng: np.random.Generator,
    stop: Optional[StopCondition] = None,
) -> int:
    """
    Draw up to `iterations` random samples (always at least one) and load the
    one with the lowest variance score. The stop condition is polled between
    samples. Returns the number of samples drawn.
    """
    best: Optional[np.ndarray] = None
    best_score = math.inf
    drawn = 0

    for _ in range(max(1, iterations)):
        if drawn and stop is not None and stop.should_stop():
            break
        sample = generate_sample(state.rows, desired, rng)
        drawn += 1
        score = compute_variance(
            sample, state.demand, state.capacity, state.average_available, state.weights
        )
        if best is None or score < best_score or (math.isnan(best_score) and not math.isnan(score)):
            best, best_score = sample, score

    logger.debug("kept best of %d random samples (score=%.6f)", drawn, best_score)
    state.load(best)
    return drawn


def greedy_allocation(state: AllocationState, desired: Sequence[int]) -> None:
    """
    Containers in input order; each goes to the `desired[j]` machines with the
    highest headroom score (lower index first on ties). Scores are refreshed
    after every container so earlier placements are taken into account.
    """
    state.load(np.zeros_like(state.matrix))
    for j, count in enumerate(desired):
        ranked = np.argsort(-state.headroom_scores(), kind="stable")
        for i in ranked[:int(count)]:
            state.assign(int(i), j)


def greedy_over_initial_state(
    state: AllocationState,
    initial: np.ndarray,
    desired: Sequence[int],
) -> None:
    """
    Start from `initial` and, for every container below its desired count,
    keep adding the free machine with the highest current headroom score.
    Existing placements are never removed, even above the desired count.
    """
    state.load(initial)
    column_counts = state.column_counts()

    for j, count in enumerate(desired):
        missing = int(count) - int(column_counts[j])
        while missing > 0:
            free = np.flatnonzero(state.columns_view[j] == 0)
            if free.size == 0:
                break
            i = int(free[int(np.argmax(state.headroom_scores()[free]))])
            state.assign(i, j)
            missing -= 1
