# -*- coding: utf-8 -*-
"""
quality_metrics/core.py

Objective and scoring helpers for the allocation matrix.
- No side effects
- Division by zero (single machine, zero average headroom, zero capacity) is
  never raised: numpy error reporting is suppressed and NaN/inf flow through
  to the caller, which classifies them.

Public API:
  - compute_average_available(capacity, demand, desired) -> np.ndarray
  - compute_variance(matrix, demand, capacity, average_available, weights) -> float
  - machine_headroom_score(state, i) -> float
  - pairwise_variance_coefficient(state, a, b) -> float
  - pairwise_overallocation_deviation(state, a, b) -> float
  - is_pair_overloaded(state, a, b) -> bool
  - capture_metrics(state, machines, kinds) -> Dict[ResourceKind, Tuple[AllocationMetric, ...]]
  - summarize_metrics(metrics) -> Dict[str, float]
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, Dict, Mapping, Sequence, Tuple

import numpy as np

from mpls.business_objects.allocations import AllocationMetric
from mpls.business_objects.machines import Machine
from mpls.business_objects.resources import ResourceKind

if TYPE_CHECKING:  # pragma: no cover - typing only
    from mpls.planning.state import AllocationState


# ---------------------------------------------------------------------------
# 1) Global objective
# ---------------------------------------------------------------------------
def compute_average_available(
    capacity: np.ndarray,
    demand: np.ndarray,
    desired: Sequence[int],
) -> np.ndarray:
    """
    Per resource: (total capacity - total desired demand) / machine count.

    This is the headroom every machine would keep under a perfectly even
    placement of all desired instances.
    """
    capacity = np.asarray(capacity, dtype=float)
    desired_demand = np.asarray(desired, dtype=float) @ np.asarray(demand, dtype=float)
    return (capacity.sum(axis=0) - desired_demand) / capacity.shape[0]


def compute_variance(
    matrix: np.ndarray,
    demand: np.ndarray,
    capacity: np.ndarray,
    average_available: np.ndarray,
    weights: np.ndarray,
) -> float:
    """
    Weighted sum over resources of the normalized sample standard deviation of
    machine headroom around `average_available`. Lower is better.

        V = sum_k [ sqrt( sum_i (cap[i,k] - used[i,k] - avg[k])^2 / (rows - 1) ) / avg[k] * w[k] ]
    """
    matrix = np.asarray(matrix, dtype=np.int64)
    rows = matrix.shape[0]
    used = matrix @ np.asarray(demand, dtype=np.int64)
    deviation = np.asarray(capacity, dtype=float) - used - average_available
    with np.errstate(divide="ignore", invalid="ignore"):
        sample_std = np.sqrt((deviation ** 2).sum(axis=0) / (rows - 1))
        return float(np.sum(sample_std / average_available * weights))


# ---------------------------------------------------------------------------
# 2) Per-machine and pairwise scores
# ---------------------------------------------------------------------------
def machine_headroom_score(state: AllocationState, machine: int) -> float:
    """Free capacity of a machine summed over resources (higher = freer)."""
    return state.machine_score(machine)


def pairwise_variance_coefficient(state: AllocationState, a: int, b: int) -> float:
    """
    Cheap local proxy for `compute_variance` restricted to two machines:
    per resource, the 2-element population deviation of headroom around the
    average, divided by |average| and weighted.
    """
    avg = state.average_available
    ha = state.headroom(a)
    hb = state.headroom(b)
    with np.errstate(divide="ignore", invalid="ignore"):
        partial_std = np.sqrt((np.abs(ha - avg) ** 2 + np.abs(hb - avg) ** 2) / 2)
        return float(np.sum(partial_std / np.abs(avg) * state.weights))


def _overallocation_ratio(headroom: np.ndarray, capacity: np.ndarray) -> np.ndarray:
    # |headroom| / capacity where the machine is over capacity, else 0
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(headroom < 0, np.abs(headroom) / capacity, 0.0)


def pairwise_overallocation_deviation(state: AllocationState, a: int, b: int) -> float:
    """
    How unevenly overload is spread between two machines: the population
    standard deviation of their overallocation ratios, summed over resources.
    """
    r1 = _overallocation_ratio(state.headroom(a), state.capacity[a])
    r2 = _overallocation_ratio(state.headroom(b), state.capacity[b])
    with np.errstate(invalid="ignore"):
        avg = (r1 + r2) / 2
        std = np.sqrt(((r1 - avg) ** 2 + (r2 - avg) ** 2) / 2)
        return float(np.sum(std))


def is_pair_overloaded(state: AllocationState, a: int, b: int) -> bool:
    """True if either machine exceeds its capacity on any optimized resource."""
    return not state.satisfies_capacity(a) or not state.satisfies_capacity(b)


# ---------------------------------------------------------------------------
# 3) Diagnostic snapshots
# ---------------------------------------------------------------------------
def capture_metrics(
    state: AllocationState,
    machines: Sequence[Machine],
    kinds: Sequence[ResourceKind],
) -> Dict[ResourceKind, Tuple[AllocationMetric, ...]]:
    """One AllocationMetric per machine for each optimized resource kind."""
    metrics: Dict[ResourceKind, Tuple[AllocationMetric, ...]] = {}
    for k, kind in enumerate(kinds):
        metrics[kind] = tuple(
            AllocationMetric(
                index=i,
                machine_name=machine.name,
                resource=kind,
                allocated=int(state.used[i, k]),
                total_available=int(state.capacity[i, k]),
            )
            for i, machine in enumerate(machines)
        )
    return metrics


def summarize_metrics(
    metrics: Mapping[ResourceKind, Sequence[AllocationMetric]],
) -> Dict[str, float]:
    """
    Returns, per resource kind value (e.g. "cpu"):
      {
        "OU[cpu]": ...,          # overall utilization, percent (0..100+)
        "BL[cpu]": ...,          # population std dev of headroom across machines
        "Overloaded[cpu]": ...,  # machines with negative headroom
      }
    """
    summary: Dict[str, float] = {}
    for kind, rows in metrics.items():
        allocated = sum(float(m.allocated) for m in rows)
        available = sum(float(m.total_available) for m in rows)
        headroom = [float(m.difference) for m in rows]

        ou = 0.0 if available == 0.0 else (allocated / available) * 100.0
        if headroom:
            mean = sum(headroom) / len(headroom)
            bl = math.sqrt(sum((h - mean) ** 2 for h in headroom) / len(headroom))
        else:
            bl = 0.0

        summary[f"OU[{kind.value}]"] = ou
        summary[f"BL[{kind.value}]"] = bl
        summary[f"Overloaded[{kind.value}]"] = float(sum(1 for h in headroom if h < 0))
    return summary
