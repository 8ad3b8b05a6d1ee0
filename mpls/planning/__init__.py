# -*- coding: utf-8 -*-
"""
Planning layer public API for the allocation pipeline.

This module exposes the core planning-time data contracts:
  - State model (AllocationState)
  - Solver configuration (SolverParameters)
  - Result models (SolutionQuality, SolverErrorCode, SolverResult)

Other planning modules (preprocessing, termination, solvers, tracker) are
intentionally not exported here to avoid cluttering the namespace. They should
be imported explicitly when needed.
"""

from .state import AllocationState
from .parameters import SolverParameters
from .solution import SolutionQuality, SolverErrorCode, SolverResult

__all__ = [
    "AllocationState",
    "SolverParameters",
    "SolutionQuality",
    "SolverErrorCode",
    "SolverResult",
]
