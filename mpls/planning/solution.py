# -*- coding: utf-8 -*-
"""
Solution contracts for allocation solves.

These types define the shape of the result produced by the solver and
consumed by the tracker / reporting layers.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from mpls.business_objects.allocations import Allocation, AllocationMetric, AllocationPlan
from mpls.business_objects.resources import ResourceKind


class SolutionQuality(str, Enum):
    FOUND_EXACT = "found_exact"
    PARTIAL = "partial"
    UNFEASIBLE = "unfeasible"
    NONE = "none"


class SolverErrorCode(str, Enum):
    ADJUSTING_ERROR_NEGATIVE_INFINITY_OR_NAN = "adjusting_error_negative_infinity_or_nan"
    MORE_CONTAINER_INSTANCES_THAN_MACHINES_AVAILABLE = "more_container_instances_than_machines_available"
    CONTAINER_REQUIRES_AT_LEAST_ONE_RESOURCE_THAT_IS_NOT_AVAILABLE = (
        "container_requires_at_least_one_resource_that_is_not_available"
    )
    NOT_ENOUGH_RESOURCES_TO_ALLOCATE_ALL_INSTANCES = "not_enough_resources_to_allocate_all_instances"
    HARD_CONSTRAINT_UNSATISFIED = "hard_constraint_unsatisfied"


MetricSnapshot = Dict[ResourceKind, Tuple[AllocationMetric, ...]]


@dataclass(frozen=True, eq=False)
class SolverResult:
    """
    Outcome of a single solve.

    Attributes
    ----------
    quality : SolutionQuality
        FOUND_EXACT, PARTIAL or UNFEASIBLE.
    error_code : SolverErrorCode | None
        Why the solve is not exact (or the non-fatal pre-flight hint).
    baseline_score : float
        Variance score right after the initial solution was built.
    initial_state_score : float
        Variance score of the caller's current allocations (0.0 when none).
    score : float
        Variance score of the returned solution.
    best_worst_swapping_iterations_spent, full_scan_iterations_spent,
    inter_container_swapping_iterations_spent : int
        Iterations actually started by each local-search phase.
    elapsed : float
        Wall-clock seconds spent in the solve.
    solution_matrix : np.ndarray
        Read-only (machines, containers) 0/1 matrix.
    plan : AllocationPlan
        All / new / removed allocations relative to the initial state.
    initial_metrics, solution_metrics : dict[ResourceKind, tuple[AllocationMetric, ...]]
        Per-machine usage before and after local search.
    """
    quality: SolutionQuality
    error_code: Optional[SolverErrorCode]
    baseline_score: float
    initial_state_score: float
    score: float
    best_worst_swapping_iterations_spent: int
    full_scan_iterations_spent: int
    inter_container_swapping_iterations_spent: int
    elapsed: float
    solution_matrix: np.ndarray
    plan: AllocationPlan = field(default_factory=AllocationPlan)
    initial_metrics: MetricSnapshot = field(default_factory=dict)
    solution_metrics: MetricSnapshot = field(default_factory=dict)

    def __post_init__(self) -> None:  # type: ignore[override]
        matrix = np.array(self.solution_matrix, dtype=np.int8, copy=True)
        matrix.setflags(write=False)
        object.__setattr__(self, "solution_matrix", matrix)

    @property
    def allocations(self) -> Tuple[Allocation, ...]:
        return self.plan.allocations

    @property
    def new_allocations(self) -> Tuple[Allocation, ...]:
        return self.plan.new_allocations

    @property
    def deallocations(self) -> Tuple[Allocation, ...]:
        return self.plan.deallocations
