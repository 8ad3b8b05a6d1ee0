# -*- coding: utf-8 -*-
"""
Preprocessing steps run before any placement is built.

  - validate_parameters             caller contract checks (raise StateValidationError)
  - resolve_hard_constraint_index   resource axis index of the hard-constraint kind
  - resolve_resource_weights        per-resource weights in optimize order
  - maximize_instance_counts        recount desired instances to fill one resource
  - check_feasibility               pre-flight: can the desired counts be placed at all?
  - seed_current_allocations        matrix of the caller's current placement
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from mpls.business_objects.allocations import Allocation
from mpls.business_objects.containers import ContainerSpec
from mpls.business_objects.errors import StateValidationError
from mpls.business_objects.machines import Machine
from mpls.business_objects.resources import ResourceKind
from mpls.planning.parameters import SolverParameters
from mpls.planning.solution import SolverErrorCode
from mpls.planning.state import AllocationState

logger = logging.getLogger(__name__)


# ----------------------------
# Caller contract
# ----------------------------

def _check_unique_names(names: Iterable[str], label: str) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise StateValidationError(f"Duplicate {label} name: {name}")
        seen.add(name)


def validate_parameters(parameters: Optional[SolverParameters]) -> None:
    """
    Reject malformed input before any computation.

    Raises
    ------
    StateValidationError
        If parameters are missing, the fleet or the workload is empty, names
        repeat, or machines (resp. containers) do not all list the same
        resource kinds in the same order.
    """
    if parameters is None:
        raise StateValidationError("parameters must not be None.")
    if not parameters.machines:
        raise StateValidationError("No machines were provided as parameters.")
    if not parameters.containers:
        raise StateValidationError("No container specs were provided as parameters.")

    _check_unique_names((m.name for m in parameters.machines), "machine")
    _check_unique_names((c.name for c in parameters.containers), "container spec")

    machine_kinds = parameters.machines[0].kinds
    if any(m.kinds != machine_kinds for m in parameters.machines):
        raise StateValidationError(
            "All machines should list the exact same resources, and specify zero when not required."
        )

    container_kinds = parameters.containers[0].kinds
    if any(c.kinds != container_kinds for c in parameters.containers):
        raise StateValidationError(
            "All container specs should list the exact same resources, and specify zero when not required."
        )


# ----------------------------
# Objective shaping
# ----------------------------

def resolve_hard_constraint_index(
    kind: Optional[ResourceKind],
    optimize_resources: Sequence[ResourceKind],
) -> Optional[int]:
    """Index of `kind` on the resource axis; a kind that is not optimized is ignored."""
    if kind is None:
        return None
    if kind not in optimize_resources:
        logger.warning(
            "hard constraint on %s ignored: it is not among the optimized resources %s",
            kind.value,
            [k.value for k in optimize_resources],
        )
        return None
    return list(optimize_resources).index(kind)


def resolve_resource_weights(
    kinds: Sequence[ResourceKind],
    weights: Optional[Mapping[ResourceKind, float]],
) -> np.ndarray:
    if not weights:
        return np.ones(len(kinds), dtype=float)
    return np.array([float(weights.get(k, 1.0)) for k in kinds], dtype=float)


def maximize_instance_counts(
    machines: Sequence[Machine],
    containers: Sequence[ContainerSpec],
    kind: ResourceKind,
    desired: Sequence[int],
) -> List[int]:
    """
    Recompute desired instance counts so the containers requiring `kind`
    fill the fleet's capacity of `kind`.

    Containers whose desired count already exceeds capacity // demand keep
    their count and their share is set aside. The remaining capacity is split
    evenly (integer division) over the remaining containers; the remainder
    goes, in input order, to containers whose per-instance demand still fits.
    Containers that do not require `kind` keep their count.
    """
    counts = [int(c) for c in desired]

    offering = [m for m in machines if m.offers(kind)]
    requiring = [(j, c) for j, c in enumerate(containers) if c.requires(kind)]

    total_capacity = sum(m.capacity_of(kind) for m in offering)
    total_demand = sum(c.demand_of(kind) for _, c in requiring)
    if total_demand == 0:
        return counts

    approximate_instances = total_capacity // total_demand
    excluded = {j for j, _ in requiring if counts[j] > approximate_instances}

    reserved_capacity = sum(containers[j].demand_of(kind) * counts[j] for j in excluded)
    excluded_demand = sum(containers[j].demand_of(kind) for j in excluded)

    remaining_capacity = total_capacity - reserved_capacity
    remaining_demand = total_demand - excluded_demand
    if remaining_demand == 0:
        return counts

    if remaining_capacity > 0:
        instances_per_container, remainder = divmod(remaining_capacity, remaining_demand)
    else:
        instances_per_container, remainder = 0, 0

    for j, container in requiring:
        if j in excluded:
            continue
        instances = instances_per_container
        unit = container.demand_of(kind)
        if remainder >= unit:
            instances += 1
            remainder -= unit
        counts[j] = instances

    logger.info("desired instance counts recomputed to maximize %s usage: %s", kind.value, counts)
    return counts


# ----------------------------
# Pre-flight
# ----------------------------

def check_feasibility(
    desired: Sequence[int],
    state: AllocationState,
) -> Tuple[bool, Optional[SolverErrorCode]]:
    """
    Returns (viable, error_code).

    - A container wanting more instances than there are machines offering one
      of the resources it requires gets a non-fatal hint.
    - A container wanting more instances than there are machines is fatal.
    """
    hint: Optional[SolverErrorCode] = None
    offering = (state.capacity > 0).sum(axis=0)

    for j, count in enumerate(desired):
        if count > state.rows:
            return False, SolverErrorCode.MORE_CONTAINER_INSTANCES_THAN_MACHINES_AVAILABLE
        required = state.demand[j] > 0
        if np.any(count > offering[required]):
            hint = SolverErrorCode.CONTAINER_REQUIRES_AT_LEAST_ONE_RESOURCE_THAT_IS_NOT_AVAILABLE

    return True, hint


# ----------------------------
# Current placement
# ----------------------------

def seed_current_allocations(
    machines: Sequence[Machine],
    containers: Sequence[ContainerSpec],
    allocations: Optional[Sequence[Allocation]],
) -> np.ndarray:
    """
    0/1 matrix of the caller's (machine, container) pairs, matched by name.
    Pairs naming an unknown machine or container are skipped; duplicates
    collapse into one cell.
    """
    matrix = np.zeros((len(machines), len(containers)), dtype=np.int8)
    if not allocations:
        return matrix

    machine_index = {m.name: i for i, m in enumerate(machines)}
    container_index = {c.name: j for j, c in enumerate(containers)}

    for allocation in allocations:
        i = machine_index.get(allocation.machine.name)
        j = container_index.get(allocation.container.name)
        if i is None or j is None:
            logger.warning(
                "skipping current allocation %s <- %s: unknown machine or container",
                allocation.machine.name,
                allocation.container.name,
            )
            continue
        matrix[i, j] = 1

    return matrix
