# -*- coding: utf-8 -*-
"""
End-to-end allocation solver (preprocessing + initial placement + local search).

Pipeline per call:
  1) Validate parameters (caller contract; raises StateValidationError)
  2) Shape the objective: hard-constraint index, resource weights, and the
     optional maximize-usage recount of desired instance counts
  3) Pre-flight feasibility; a fatal result returns UNFEASIBLE right away
  4) Initial placement:
        - no current allocations, random iterations > 0 -> best random sample
        - no current allocations otherwise               -> greedy
        - current allocations                            -> seed + greedy top-up
  5) Local search: best/worst swapping, full-scan swapping, container 2-swaps
     (each bounded by its iteration cap, the timeout and the churn budget)
  6) Classify the final matrix, diff it against the initial state, capture
     metrics, and optionally write CSV artifacts through a Tracker

Every call owns its own state, random generator and stop condition, so
separate calls may run concurrently.
"""

from __future__ import annotations
import logging
import time
from typing import Optional

import numpy as np

from mpls.business_objects.allocations import AllocationPlan
from mpls.heuristics.initial_solution.strategies import (
    generate_samples,
    greedy_allocation,
    greedy_over_initial_state,
)
from mpls.heuristics.local_search.strategies import (
    full_scan_swap,
    swap_best_worst,
    swap_containers,
)
from mpls.planning.parameters import SolverParameters
from mpls.planning.preprocessing import (
    check_feasibility,
    maximize_instance_counts,
    resolve_hard_constraint_index,
    resolve_resource_weights,
    seed_current_allocations,
    validate_parameters,
)
from mpls.planning.solution import SolutionQuality, SolverResult
from mpls.planning.state import AllocationState
from mpls.planning.termination import (
    ChurnBudget,
    StopCondition,
    build_allocation_plan,
    classify_solution,
)
from mpls.planning.tracker import Tracker
from mpls.quality_metrics.core import (
    capture_metrics,
    compute_average_available,
    compute_variance,
)

logger = logging.getLogger(__name__)


def run_mpls(
    parameters: SolverParameters,
    tracker: Optional[Tracker] = None,
) -> SolverResult:
    """
    Solve one allocation problem.

    Parameters
    ----------
    parameters : SolverParameters
        Fleet, workload, current placement and search knobs.
    tracker : Tracker | None
        If provided, CSV artifacts of the result are written to tracker.out_dir.

    Returns
    -------
    SolverResult
        Never raises for solver outcomes; see SolverResult.quality/error_code.
    """
    validate_parameters(parameters)
    started = time.perf_counter()

    machines = parameters.machines
    containers = parameters.containers
    kinds = parameters.optimize_resources

    desired = [c.desired_instance_count for c in containers]
    if parameters.maximize_resource_usage_for is not None:
        desired = maximize_instance_counts(
            machines, containers, parameters.maximize_resource_usage_for, desired
        )

    state = AllocationState.from_fleet(
        machines,
        containers,
        kinds,
        weights=resolve_resource_weights(kinds, parameters.resource_weights),
        hard_constraint_index=resolve_hard_constraint_index(
            parameters.hard_constraint_resource, kinds
        ),
    )
    initial = np.zeros((state.rows, state.columns), dtype=np.int8)
    stop = StopCondition(timeout=parameters.timeout, state=state, initial=initial)

    logger.info(
        "solving %d container specs (%d instances) over %d machines, resources=%s",
        state.columns,
        sum(desired),
        state.rows,
        [k.value for k in kinds],
    )

    viable, error_code = check_feasibility(desired, state)
    if not viable:
        logger.warning("pre-flight check failed: %s", error_code.value)
        result = SolverResult(
            quality=SolutionQuality.UNFEASIBLE,
            error_code=error_code,
            baseline_score=float("nan"),
            initial_state_score=float("nan"),
            score=float("nan"),
            best_worst_swapping_iterations_spent=0,
            full_scan_iterations_spent=0,
            inter_container_swapping_iterations_spent=0,
            elapsed=time.perf_counter() - started,
            solution_matrix=state.snapshot(),
            plan=AllocationPlan(),
        )
        if tracker is not None:
            tracker.write_all(result)
        return result

    if error_code is not None:
        logger.warning("pre-flight hint: %s", error_code.value)

    state.average_available = compute_average_available(state.capacity, state.demand, desired)

    # ---- Initial placement ----
    initial_state_score = 0.0
    if parameters.current_allocations is None:
        if parameters.initial_random_guess_iterations > 0:
            rng = np.random.default_rng(parameters.seed)
            generate_samples(state, desired, parameters.initial_random_guess_iterations, rng, stop)
        else:
            greedy_allocation(state, desired)
    else:
        initial[...] = seed_current_allocations(machines, containers, parameters.current_allocations)
        initial_state_score = compute_variance(
            initial, state.demand, state.capacity, state.average_available, state.weights
        )
        greedy_over_initial_state(state, initial, desired)

    baseline_score = state.variance()
    initial_metrics = capture_metrics(state, machines, kinds)
    logger.debug("initial placement score=%.6f", baseline_score)

    # ---- Local search ----
    current_counts = initial.sum(axis=0) if parameters.has_current_allocations else None
    budget = ChurnBudget.from_percentage(parameters.allowed_churn_percentage, desired, current_counts)
    stop.budget = budget

    best_worst_iterations = swap_best_worst(
        state, parameters.best_worst_swapping_iterations, budget, stop
    )
    full_scan_iterations = full_scan_swap(state, parameters.full_scan_iterations, budget, stop)
    container_iterations = swap_containers(
        state, parameters.full_scan_swap_container_iterations, budget, stop
    )
    logger.debug(
        "local search iterations: best/worst=%d full-scan=%d container-swap=%d",
        best_worst_iterations,
        full_scan_iterations,
        container_iterations,
    )

    # ---- Result ----
    score = state.variance()
    solution_metrics = capture_metrics(state, machines, kinds)
    quality, error_code = classify_solution(state, desired, score, error_code)
    plan = build_allocation_plan(machines, containers, initial, state.matrix)

    result = SolverResult(
        quality=quality,
        error_code=error_code,
        baseline_score=baseline_score,
        initial_state_score=initial_state_score,
        score=score,
        best_worst_swapping_iterations_spent=best_worst_iterations,
        full_scan_iterations_spent=full_scan_iterations,
        inter_container_swapping_iterations_spent=container_iterations,
        elapsed=time.perf_counter() - started,
        solution_matrix=state.snapshot(),
        plan=plan,
        initial_metrics=initial_metrics,
        solution_metrics=solution_metrics,
    )

    logger.info(
        "solve finished: quality=%s score=%.6f (baseline %.6f) new=%d removed=%d in %.3fs",
        quality.value,
        score,
        baseline_score,
        len(plan.new_allocations),
        len(plan.deallocations),
        result.elapsed,
    )

    if tracker is not None:
        tracker.write_all(result)
    return result


class MplsAllocationSolver:
    """
    Solver facade. Holds no per-solve state: every `solve` call runs on
    freshly built state, so one instance may be shared.
    """

    def __init__(self, tracker: Optional[Tracker] = None) -> None:
        self.tracker = tracker

    def solve(self, parameters: SolverParameters) -> SolverResult:
        return run_mpls(parameters, tracker=self.tracker)


# Convenience alias mirroring naming used elsewhere
solve = run_mpls
