# -*- coding: utf-8 -*-
"""
Multi-resource container allocation by local search.

Typical use:

    from mpls import Machine, ContainerSpec, ResourceUsage, SolverParameters, solve

    result = solve(SolverParameters(machines=machines, containers=containers))
    result.quality, result.new_allocations, result.deallocations
"""

from .business_objects import (
    Allocation,
    AllocationMetric,
    AllocationPlan,
    ContainerSpec,
    Machine,
    ResourceKind,
    ResourceUsage,
    SchemaError,
    StateValidationError,
)
from .planning import SolutionQuality, SolverErrorCode, SolverParameters, SolverResult
from .planning.solvers.mpls_solver import MplsAllocationSolver, solve

__all__ = [
    "Allocation",
    "AllocationMetric",
    "AllocationPlan",
    "ContainerSpec",
    "Machine",
    "ResourceKind",
    "ResourceUsage",
    "SchemaError",
    "StateValidationError",
    "SolutionQuality",
    "SolverErrorCode",
    "SolverParameters",
    "SolverResult",
    "MplsAllocationSolver",
    "solve",
]
