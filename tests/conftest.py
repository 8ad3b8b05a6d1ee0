# -*- coding: utf-8 -*-
"""
Shared factories for the test suite.
"""

from typing import Optional, Sequence

import numpy as np
import pytest

from mpls.business_objects import ContainerSpec, Machine, ResourceKind, ResourceUsage
from mpls.planning.state import AllocationState
from mpls.quality_metrics.core import compute_average_available


@pytest.fixture
def make_machine():
    def _make(name: str, cpu: int = 10, memory: int = 10, tag: Optional[str] = None) -> Machine:
        return Machine(
            name=name,
            resources=(
                ResourceUsage(ResourceKind.CPU, cpu),
                ResourceUsage(ResourceKind.MEMORY, memory),
            ),
            tag=tag,
        )
    return _make


@pytest.fixture
def make_container():
    def _make(name: str, cpu: int = 5, memory: int = 5, count: int = 1) -> ContainerSpec:
        return ContainerSpec(
            name=name,
            resources=(
                ResourceUsage(ResourceKind.CPU, cpu),
                ResourceUsage(ResourceKind.MEMORY, memory),
            ),
            desired_instance_count=count,
        )
    return _make


@pytest.fixture
def make_state():
    """AllocationState from plain lists, with the balanced-headroom average filled in."""
    def _make(
        capacity,
        demand,
        desired: Sequence[int],
        matrix=None,
        hard_constraint_index: Optional[int] = None,
    ) -> AllocationState:
        capacity = np.asarray(capacity)
        demand = np.asarray(demand)
        return AllocationState(
            capacity,
            demand,
            matrix=matrix,
            average_available=compute_average_available(capacity, demand, desired),
            hard_constraint_index=hard_constraint_index,
        )
    return _make
