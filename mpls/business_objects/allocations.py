# -*- coding: utf-8 -*-
"""
Allocation value objects: single placements, plans and per-machine metrics.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .containers import ContainerSpec
from .machines import Machine
from .resources import ResourceKind


@dataclass(frozen=True)
class Allocation:
    """One instance of `container` scheduled on `machine`."""
    machine: Machine
    container: ContainerSpec


@dataclass(frozen=True)
class AllocationPlan:
    """
    Diff of a solution against the initial state.

    Attributes
    ----------
    allocations : tuple[Allocation, ...]
        Every placement present in the solution.
    new_allocations : tuple[Allocation, ...]
        Placements in the solution that were absent from the initial state.
    deallocations : tuple[Allocation, ...]
        Placements of the initial state that the solution drops.
    """
    allocations: Tuple[Allocation, ...] = ()
    new_allocations: Tuple[Allocation, ...] = ()
    deallocations: Tuple[Allocation, ...] = ()


@dataclass(frozen=True)
class AllocationMetric:
    """Allocated vs. available amount of one resource on one machine."""
    index: int
    machine_name: str
    resource: ResourceKind
    allocated: int
    total_available: int

    @property
    def difference(self) -> int:
        return self.total_available - self.allocated
