# -*- coding: utf-8 -*-
"""
SolverParameters (configuration knobs) for one allocation solve.

Inputs:
  - machines / containers: the fleet and the workloads to place
  - current_allocations: optional baseline placement; when given, the solver
    tops it up greedily instead of building a placement from scratch, and the
    churn budget is measured against it

Objective:
  - optimize_resources: resource kinds that are balanced (order = resource axis)
  - resource_weights: per-kind multiplier of the variance score (default 1.0)
  - hard_constraint_resource: kind that may never exceed capacity
  - maximize_resource_usage_for: recompute desired instance counts to fill the
    fleet's capacity of this kind before placing anything

Search budget:
  - initial_random_guess_iterations: random samples for the initial solution
    (0 = deterministic greedy)
  - best_worst_swapping_iterations / full_scan_iterations /
    full_scan_swap_container_iterations: caps for the three local-search phases
  - timeout: wall-clock seconds, checked between iterations
  - allowed_churn_percentage: 0..100, share of a container's instances that
    may be moved away from where they currently run

Run control:
  - seed: optional seed of the per-solve random generator
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from mpls.business_objects.allocations import Allocation
from mpls.business_objects.containers import ContainerSpec
from mpls.business_objects.errors import StateValidationError
from mpls.business_objects.machines import Machine
from mpls.business_objects.resources import ResourceKind


def _as_kind(value) -> ResourceKind:
    try:
        return ResourceKind(value)
    except ValueError as e:
        raise StateValidationError(f"Unknown resource kind: {value!r}") from e


@dataclass(frozen=True)
class SolverParameters:
    """
    Solve inputs and knobs (pure data holder).

    Sequences are stored as tuples; emptiness of machines/containers is checked
    by the solver, knob ranges are checked here.
    """
    machines: Tuple[Machine, ...]
    containers: Tuple[ContainerSpec, ...]
    current_allocations: Optional[Tuple[Allocation, ...]] = None

    # Objective
    optimize_resources: Tuple[ResourceKind, ...] = (ResourceKind.CPU, ResourceKind.MEMORY)
    resource_weights: Optional[Mapping[ResourceKind, float]] = None
    hard_constraint_resource: Optional[ResourceKind] = None
    maximize_resource_usage_for: Optional[ResourceKind] = None

    # Search budget
    initial_random_guess_iterations: int = 0
    best_worst_swapping_iterations: int = 1000
    full_scan_iterations: int = 1
    full_scan_swap_container_iterations: int = 1
    timeout: Optional[float] = None
    allowed_churn_percentage: Optional[float] = None

    # Run control
    seed: Optional[int] = None

    def __post_init__(self) -> None:  # type: ignore[override]
        if self.machines is not None:
            object.__setattr__(self, "machines", tuple(self.machines))
        if self.containers is not None:
            object.__setattr__(self, "containers", tuple(self.containers))
        if self.current_allocations is not None:
            object.__setattr__(self, "current_allocations", tuple(self.current_allocations))
        object.__setattr__(
            self,
            "optimize_resources",
            tuple(_as_kind(k) for k in self.optimize_resources),
        )
        for name in ("hard_constraint_resource", "maximize_resource_usage_for"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _as_kind(value))
        if self.resource_weights is not None:
            object.__setattr__(
                self,
                "resource_weights",
                {_as_kind(k): float(w) for k, w in self.resource_weights.items()},
            )

        if not self.optimize_resources:
            raise StateValidationError("optimize_resources must list at least one resource kind.")
        if len(set(self.optimize_resources)) != len(self.optimize_resources):
            raise StateValidationError("optimize_resources must not repeat a resource kind.")

        for name in (
            "initial_random_guess_iterations",
            "best_worst_swapping_iterations",
            "full_scan_iterations",
            "full_scan_swap_container_iterations",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise StateValidationError(f"{name} must be a nonnegative integer, got {value!r}.")

        if self.timeout is not None and self.timeout < 0:
            raise StateValidationError("timeout must be >= 0 seconds.")
        if self.allowed_churn_percentage is not None and not 0 <= self.allowed_churn_percentage <= 100:
            raise StateValidationError("allowed_churn_percentage must be within 0..100.")
        if self.resource_weights is not None:
            for kind, weight in self.resource_weights.items():
                if weight < 0:
                    raise StateValidationError(f"resource weight for {kind} must be >= 0.")

    @property
    def has_current_allocations(self) -> bool:
        return bool(self.current_allocations)
