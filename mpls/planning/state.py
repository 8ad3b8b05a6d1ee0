# -*- coding: utf-8 -*-
"""
Run-time allocation state for a single solve.

This module defines:
  - AllocationState: the binary allocation matrix (machines x container specs)
    together with the per-resource capacity/demand arrays it is scored against.

Notes
-----
- Business (timeless) entities live in `business_objects/`:
  * business_objects.machines.Machine
  * business_objects.containers.ContainerSpec
- Row i is machine i and column j is container spec j, both in input order.
  The resource axis follows `SolverParameters.optimize_resources`.
- `used` (machines x resources) is kept in sync with every cell flip, so
  headroom queries never rescan the matrix.
"""

from __future__ import annotations
from typing import Optional, Sequence

import numpy as np

from mpls.business_objects.containers import ContainerSpec
from mpls.business_objects.errors import StateValidationError
from mpls.business_objects.machines import Machine
from mpls.business_objects.resources import ResourceKind
from mpls.quality_metrics.core import compute_variance


class AllocationState:
    """
    Mutable allocation matrix owned by one solver run.

    Attributes
    ----------
    capacity : np.ndarray
        (machines, resources) capacity per machine.
    demand : np.ndarray
        (containers, resources) per-instance demand per container spec.
    matrix : np.ndarray
        (machines, containers) int8 0/1 placement matrix.
    used : np.ndarray
        (machines, resources) amount consumed under `matrix`.
    average_available : np.ndarray
        (resources,) average headroom a perfectly balanced placement would leave.
    weights : np.ndarray
        (resources,) contribution of each resource to the combined score.
    hard_constraint_index : int | None
        Resource index that may never exceed capacity, if any.
    """

    def __init__(
        self,
        capacity: np.ndarray,
        demand: np.ndarray,
        matrix: Optional[np.ndarray] = None,
        average_available: Optional[np.ndarray] = None,
        weights: Optional[np.ndarray] = None,
        hard_constraint_index: Optional[int] = None,
    ) -> None:
        self.capacity = np.asarray(capacity, dtype=np.int64)
        self.demand = np.asarray(demand, dtype=np.int64)
        if self.capacity.ndim != 2 or self.demand.ndim != 2:
            raise StateValidationError("capacity and demand must be 2-D arrays.")
        if self.capacity.shape[1] != self.demand.shape[1]:
            raise StateValidationError("capacity and demand must share the resource axis.")

        resources = self.capacity.shape[1]
        self.average_available = (
            np.zeros(resources, dtype=float)
            if average_available is None
            else np.asarray(average_available, dtype=float)
        )
        self.weights = (
            np.ones(resources, dtype=float)
            if weights is None
            else np.asarray(weights, dtype=float)
        )
        self.hard_constraint_index = hard_constraint_index

        self.matrix = np.zeros((self.rows, self.columns), dtype=np.int8)
        self.used = np.zeros_like(self.capacity)
        if matrix is not None:
            self.load(matrix)

    @classmethod
    def from_fleet(
        cls,
        machines: Sequence[Machine],
        containers: Sequence[ContainerSpec],
        kinds: Sequence[ResourceKind],
        **kwargs,
    ) -> "AllocationState":
        """Build capacity/demand arrays by looking each optimized kind up by name (0 if unlisted)."""
        capacity = np.array(
            [[m.capacity_of(k) for k in kinds] for m in machines], dtype=np.int64
        ).reshape(len(machines), len(kinds))
        demand = np.array(
            [[c.demand_of(k) for k in kinds] for c in containers], dtype=np.int64
        ).reshape(len(containers), len(kinds))
        return cls(capacity, demand, **kwargs)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return self.capacity.shape[0]

    @property
    def columns(self) -> int:
        return self.demand.shape[0]

    @property
    def resource_count(self) -> int:
        return self.capacity.shape[1]

    @property
    def columns_view(self) -> np.ndarray:
        """Container-major view over the same buffer (column j -> machines hosting spec j)."""
        return self.matrix.T

    # ------------------------------------------------------------------
    # Matrix mutation
    # ------------------------------------------------------------------
    def load(self, matrix: np.ndarray) -> None:
        """Replace the placement and recompute usage."""
        matrix = np.asarray(matrix)
        if matrix.shape != (self.rows, self.columns):
            raise StateValidationError(
                f"matrix shape {matrix.shape} does not match ({self.rows}, {self.columns})."
            )
        self.matrix[...] = matrix
        self.used = self.matrix.astype(np.int64) @ self.demand

    def snapshot(self) -> np.ndarray:
        return self.matrix.copy()

    def hosts(self, machine: int, container: int) -> bool:
        return bool(self.matrix[machine, container])

    def assign(self, machine: int, container: int) -> None:
        if self.matrix[machine, container]:
            return
        self.matrix[machine, container] = 1
        self.used[machine] += self.demand[container]

    def unassign(self, machine: int, container: int) -> None:
        if not self.matrix[machine, container]:
            return
        self.matrix[machine, container] = 0
        self.used[machine] -= self.demand[container]

    def move(self, container: int, source: int, destination: int) -> None:
        """Move one instance of `container` from machine `source` to machine `destination`."""
        self.unassign(source, container)
        self.assign(destination, container)

    def exchange(self, machine1: int, container1: int, machine2: int, container2: int) -> None:
        """2-swap: machine1 gives container1 and takes container2; machine2 the reverse."""
        self.unassign(machine1, container1)
        self.assign(machine1, container2)
        self.assign(machine2, container1)
        self.unassign(machine2, container2)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def headroom(self, machine: int) -> np.ndarray:
        """Capacity minus usage per resource (negative when overloaded)."""
        return self.capacity[machine] - self.used[machine]

    def machine_score(self, machine: int) -> float:
        return float(self.headroom(machine).sum())

    def headroom_scores(self) -> np.ndarray:
        return (self.capacity - self.used).sum(axis=1).astype(float)

    def column_counts(self) -> np.ndarray:
        return self.matrix.sum(axis=0, dtype=np.int64)

    def satisfies_capacity(self, machine: int) -> bool:
        return bool(np.all(self.used[machine] <= self.capacity[machine]))

    def all_capacities_satisfied(self) -> bool:
        return bool(np.all(self.used <= self.capacity))

    def hard_constraint_satisfied(self, machine: Optional[int] = None) -> bool:
        k = self.hard_constraint_index
        if k is None:
            return True
        if machine is None:
            return bool(np.all(self.used[:, k] <= self.capacity[:, k]))
        return bool(self.used[machine, k] <= self.capacity[machine, k])

    def breaks_hard_constraint(self, machine: int, added: int) -> bool:
        """
        True if growing the hard-constrained usage of `machine` by `added`
        would exceed its capacity. Shrinking usage is always allowed.
        """
        k = self.hard_constraint_index
        if k is None or added <= 0:
            return False
        return bool(self.used[machine, k] + added > self.capacity[machine, k])

    def variance(self) -> float:
        return compute_variance(
            self.matrix, self.demand, self.capacity, self.average_available, self.weights
        )
