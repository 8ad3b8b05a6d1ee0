# -*- coding: utf-8 -*-
"""
Stop conditions, churn accounting and result assembly for a solve.

  - ChurnBudget:            per-container cap on moves away from the current placement
  - StopCondition:          cooperative timeout + churn-exhaustion check
  - deallocation_counts:    per-container removals relative to the initial state
  - classify_solution:      SolutionQuality / SolverErrorCode of the final matrix
  - build_allocation_plan:  all / new / removed allocations
"""

from __future__ import annotations
import math
import time
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from mpls.business_objects.allocations import Allocation, AllocationPlan
from mpls.business_objects.containers import ContainerSpec
from mpls.business_objects.machines import Machine
from mpls.planning.solution import SolutionQuality, SolverErrorCode
from mpls.planning.state import AllocationState


def deallocation_counts(initial: np.ndarray, final: np.ndarray) -> np.ndarray:
    """Per column: cells set in `initial` and cleared in `final`."""
    return ((np.asarray(initial) == 1) & (np.asarray(final) == 0)).sum(axis=0, dtype=np.int64)


class ChurnBudget:
    """
    Tracks how many instances of each container spec have been moved.

    The budget is inactive (never exhausted) unless a churn percentage was
    requested AND the solve started from current allocations.
    """

    def __init__(self, columns: int, max_deallocations: Optional[Sequence[int]] = None) -> None:
        self.max_deallocations = (
            None if max_deallocations is None else np.asarray(max_deallocations, dtype=np.int64)
        )
        self.current = np.zeros(columns, dtype=np.int64)

    @classmethod
    def from_percentage(
        cls,
        percentage: Optional[float],
        desired: Sequence[int],
        current_counts: Optional[Sequence[int]] = None,
    ) -> "ChurnBudget":
        """
        max_deallocations[j] = floor(percentage / 100 * base[j]), where base is
        the current per-container count when a current placement exists.
        """
        desired = np.asarray(desired, dtype=np.int64)
        if percentage is None or current_counts is None:
            return cls(len(desired))
        base = np.asarray(current_counts, dtype=float)
        limits = np.floor(base * float(percentage) / 100.0).astype(np.int64)
        return cls(len(desired), limits)

    @property
    def active(self) -> bool:
        return self.max_deallocations is not None

    def is_exhausted(self, container: int) -> bool:
        if not self.active:
            return False
        return bool(self.current[container] >= self.max_deallocations[container])

    def all_exhausted(self) -> bool:
        if not self.active:
            return False
        return bool(np.all(self.current >= self.max_deallocations))

    def record(self, container: int) -> None:
        self.current[container] += 1

    def refresh(self, counts: np.ndarray) -> None:
        """Replace the running move counters with real deallocation counts."""
        self.current = np.asarray(counts, dtype=np.int64).copy()


class StopCondition:
    """
    Cooperative stop check, polled between samples, iterations, sweeps and rows.

    Stops when the timeout has elapsed, or when every container has used up its
    churn budget. Move counters overestimate churn (an instance moved twice,
    or moved back, counts twice), so before stopping on churn the counters are
    recomputed from the real diff against the initial state.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        budget: Optional[ChurnBudget] = None,
        state: Optional[AllocationState] = None,
        initial: Optional[np.ndarray] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.timeout = timeout
        self.budget = budget
        self.state = state
        self.initial = initial
        self._clock = clock
        self._started = clock()

    def elapsed(self) -> float:
        return self._clock() - self._started

    def timed_out(self) -> bool:
        return self.timeout is not None and self.elapsed() >= self.timeout

    def should_stop(self) -> bool:
        if self.timed_out():
            return True

        if self.budget is not None and self.budget.all_exhausted():
            if self.state is not None and self.initial is not None:
                self.budget.refresh(deallocation_counts(self.initial, self.state.matrix))
            return self.budget.all_exhausted()

        return False


def classify_solution(
    state: AllocationState,
    desired: Sequence[int],
    score: float,
    hint: Optional[SolverErrorCode] = None,
) -> Tuple[SolutionQuality, Optional[SolverErrorCode]]:
    """
    FOUND_EXACT when every column holds its desired count and no machine is over
    capacity (the pre-flight hint, if any, is passed through); otherwise the
    first failure among numerical breakdown, hard constraint, and shortfall.
    """
    counts_ok = np.array_equal(state.column_counts(), np.asarray(desired, dtype=np.int64))
    if counts_ok and state.all_capacities_satisfied():
        return SolutionQuality.FOUND_EXACT, hint

    if math.isnan(score) or score == -math.inf:
        return SolutionQuality.UNFEASIBLE, SolverErrorCode.ADJUSTING_ERROR_NEGATIVE_INFINITY_OR_NAN

    if not state.hard_constraint_satisfied():
        return SolutionQuality.UNFEASIBLE, SolverErrorCode.HARD_CONSTRAINT_UNSATISFIED

    return SolutionQuality.PARTIAL, SolverErrorCode.NOT_ENOUGH_RESOURCES_TO_ALLOCATE_ALL_INSTANCES


def build_allocation_plan(
    machines: Sequence[Machine],
    containers: Sequence[ContainerSpec],
    initial: np.ndarray,
    final: np.ndarray,
) -> AllocationPlan:
    """Row-major diff of `final` against `initial`."""
    initial = np.asarray(initial)
    final = np.asarray(final)

    allocations: List[Allocation] = []
    new_allocations: List[Allocation] = []
    deallocations: List[Allocation] = []

    for i, j in np.argwhere((initial == 1) | (final == 1)):
        item = Allocation(machine=machines[i], container=containers[j])
        before, after = initial[i, j], final[i, j]
        if after == 1:
            allocations.append(item)
            if before == 0:
                new_allocations.append(item)
        elif before == 1:
            deallocations.append(item)

    return AllocationPlan(
        allocations=tuple(allocations),
        new_allocations=tuple(new_allocations),
        deallocations=tuple(deallocations),
    )
