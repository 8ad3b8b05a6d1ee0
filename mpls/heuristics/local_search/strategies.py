# -*- coding: utf-8 -*-
"""
Local-search strategies that improve an initial placement in place.

Public entry points (each returns the number of iterations/sweeps started):
  1) swap_best_worst    move instances from the fullest machine to the freest
                        one until that pair stops changing
  2) full_scan_swap     the same single-instance move over every ordered
                        machine pair, sweep after sweep
  3) swap_containers    2-opt: two machines trade one instance of two
                        different container specs

Every move keeps per-container instance counts unchanged, is judged by
`acceptance.should_accept` on the two machines involved, honors the
per-container churn budget, and never grows a machine's usage of the
hard-constraint resource past its capacity.
"""

from __future__ import annotations
import logging
from typing import Optional, Tuple

import numpy as np

from mpls.planning.state import AllocationState
from mpls.planning.termination import ChurnBudget, StopCondition
from mpls.utils.arrays import arg_max, arg_min
from .acceptance import SwapEvaluation, evaluate_pair, should_accept

logger = logging.getLogger(__name__)


# -----------------------------
# Move helpers
# -----------------------------

def _hard_constraint_delta(state: AllocationState, gained: int, lost: Optional[int] = None) -> int:
    k = state.hard_constraint_index
    if k is None:
        return 0
    delta = int(state.demand[gained, k])
    if lost is not None:
        delta -= int(state.demand[lost, k])
    return delta


def _movable_containers(state: AllocationState, source: int, destination: int) -> np.ndarray:
    """Columns hosted on `source` but not on `destination`."""
    return np.flatnonzero((state.matrix[source] == 1) & (state.matrix[destination] == 0))


def try_move(
    state: AllocationState,
    container: int,
    source: int,
    destination: int,
    baseline: SwapEvaluation,
    budget: ChurnBudget,
    scores: Optional[np.ndarray] = None,
) -> Tuple[bool, SwapEvaluation]:
    """
    Move one instance of `container` from `source` to `destination` if the
    acceptance policy prefers the result; otherwise leave the matrix untouched.

    Returns (accepted, evaluation of the pair after the decision).
    """
    if state.breaks_hard_constraint(destination, _hard_constraint_delta(state, container)):
        return False, baseline

    state.move(container, source, destination)
    candidate = evaluate_pair(state, destination, source)

    if should_accept(baseline, candidate):
        if scores is not None:
            scores[source] = state.machine_score(source)
            scores[destination] = state.machine_score(destination)
        budget.record(container)
        logger.debug("moved container %d from machine %d to %d", container, source, destination)
        return True, candidate

    state.move(container, destination, source)
    return False, baseline


# -----------------------------
# Strategies
# -----------------------------

def swap_best_worst(
    state: AllocationState,
    max_iterations: int,
    budget: ChurnBudget,
    stop: StopCondition,
) -> int:
    """
    Repeatedly pair the machine with the least headroom (worst) with the one
    with the most (best) and try to move each of worst's containers over.
    Converged when the same pair comes up twice in a row.
    """
    scores = state.headroom_scores()
    previous: Optional[Tuple[int, int]] = None

    iteration = 0
    while iteration < max_iterations and not stop.should_stop():
        iteration += 1
        worst = arg_min(scores)
        best = arg_max(scores)

        if previous == (best, worst):
            logger.debug("best/worst swapping converged on machines %d/%d", best, worst)
            break

        baseline = evaluate_pair(state, best, worst)
        for j in _movable_containers(state, worst, best):
            if budget.is_exhausted(j):
                continue
            _, baseline = try_move(state, j, worst, best, baseline, budget, scores)

        previous = (best, worst)

    return iteration


def full_scan_swap(
    state: AllocationState,
    max_iterations: int,
    budget: ChurnBudget,
    stop: StopCondition,
) -> int:
    """
    Sweep every ordered machine pair (i ascending, i2 descending) and try to
    move each container from i to i2. Repeats until a sweep accepts nothing.
    """
    iteration = 0
    swapped = True
    while swapped and iteration < max_iterations and not stop.should_stop():
        iteration += 1
        swapped = False

        for i in range(state.rows):
            if stop.should_stop():
                break
            for i2 in range(state.rows - 1, -1, -1):
                if i == i2:
                    continue
                candidates = _movable_containers(state, i, i2)
                if candidates.size == 0:
                    continue

                baseline = evaluate_pair(state, i2, i)
                for j in candidates:
                    if budget.is_exhausted(j):
                        continue
                    accepted, baseline = try_move(state, j, i, i2, baseline, budget)
                    swapped = swapped or accepted

        logger.debug("full scan sweep %d: swapped=%s", iteration, swapped)

    return iteration


def swap_containers(
    state: AllocationState,
    max_iterations: int,
    budget: ChurnBudget,
    stop: StopCondition,
) -> int:
    """
    For every machine pair (m1, m2) trade an instance of c1 (on m1 only) for
    an instance of c2 (on m2 only). Both container counts are preserved.
    """
    iteration = 0
    swapped = True
    while swapped and iteration < max_iterations and not stop.should_stop():
        iteration += 1
        swapped = False

        for m1 in range(state.rows):
            if stop.should_stop():
                break
            for m2 in range(state.rows - 1, -1, -1):
                if m1 == m2:
                    continue
                first = _movable_containers(state, m1, m2)
                second = _movable_containers(state, m2, m1)
                if first.size == 0 or second.size == 0:
                    continue

                baseline = evaluate_pair(state, m1, m2)
                for c1 in first:
                    if budget.is_exhausted(c1):
                        continue
                    for c2 in second:
                        # c2 may have reached m1 through an earlier trade
                        if not state.hosts(m2, c2) or state.hosts(m1, c2):
                            continue
                        if budget.is_exhausted(c2):
                            continue
                        if state.breaks_hard_constraint(m1, _hard_constraint_delta(state, c2, c1)):
                            continue
                        if state.breaks_hard_constraint(m2, _hard_constraint_delta(state, c1, c2)):
                            continue

                        state.exchange(m1, c1, m2, c2)
                        candidate = evaluate_pair(state, m1, m2)

                        if should_accept(baseline, candidate):
                            baseline = candidate
                            swapped = True
                            budget.record(c1)
                            budget.record(c2)
                            logger.debug(
                                "traded container %d (machine %d) for container %d (machine %d)",
                                c1, m1, c2, m2,
                            )
                            # c1 has left m1
                            break

                        state.exchange(m1, c2, m2, c1)

        logger.debug("container swap sweep %d: swapped=%s", iteration, swapped)

    return iteration
