# -*- coding: utf-8 -*-
import pytest

from mpls.business_objects import (
    AllocationMetric,
    AllocationPlan,
    ContainerSpec,
    Machine,
    ResourceKind,
    ResourceUsage,
    StateValidationError,
)
from mpls.business_objects.resources import amount_of, kinds_of


# ---------------------------------------------------------------------------
# ResourceUsage
# ---------------------------------------------------------------------------

def test_resource_usage_coerces_kind_from_string():
    usage = ResourceUsage("cpu", 4)
    assert usage.kind is ResourceKind.CPU
    assert usage.amount == 4


@pytest.mark.parametrize("kind, amount", [("cpu", -1), ("cpu", True), ("cpu", 1.5), ("tpu", 1)])
def test_resource_usage_rejects_invalid_values(kind, amount):
    with pytest.raises(StateValidationError):
        ResourceUsage(kind, amount)


def test_requires_needs_matching_kind_and_positive_amount():
    assert ResourceUsage(ResourceKind.CPU, 3).requires(ResourceKind.CPU)
    assert not ResourceUsage(ResourceKind.CPU, 0).requires(ResourceKind.CPU)
    assert not ResourceUsage(ResourceKind.CPU, 3).requires(ResourceKind.MEMORY)


def test_amount_and_kinds_helpers():
    usages = (ResourceUsage("memory", 8), ResourceUsage("cpu", 2))
    assert amount_of(usages, ResourceKind.MEMORY) == 8
    assert amount_of(usages, ResourceKind.GPU) == 0
    assert kinds_of(usages) == (ResourceKind.MEMORY, ResourceKind.CPU)


# ---------------------------------------------------------------------------
# Machine / ContainerSpec
# ---------------------------------------------------------------------------

def test_machine_lookups(make_machine):
    machine = make_machine("m0", cpu=0, memory=16, tag="small")
    assert machine.kinds == (ResourceKind.CPU, ResourceKind.MEMORY)
    assert machine.capacity_of(ResourceKind.MEMORY) == 16
    assert machine.capacity_of(ResourceKind.DISK) == 0
    assert machine.offers(ResourceKind.MEMORY)
    assert not machine.offers(ResourceKind.CPU)
    assert machine.tag == "small"


def test_machine_rejects_empty_name_and_duplicate_kinds():
    with pytest.raises(StateValidationError):
        Machine(name="", resources=())
    with pytest.raises(StateValidationError):
        Machine(name="m0", resources=(ResourceUsage("cpu", 1), ResourceUsage("cpu", 2)))


def test_container_spec_lookups(make_container):
    spec = make_container("web", cpu=2, memory=0, count=3)
    assert spec.demand_of(ResourceKind.CPU) == 2
    assert spec.requires(ResourceKind.CPU)
    assert not spec.requires(ResourceKind.MEMORY)
    assert spec.desired_instance_count == 3


@pytest.mark.parametrize("count", [-1, 2.0, False])
def test_container_spec_rejects_bad_instance_count(count):
    with pytest.raises(StateValidationError):
        ContainerSpec(name="web", resources=(ResourceUsage("cpu", 1),), desired_instance_count=count)


def test_resources_are_stored_as_tuples():
    machine = Machine(name="m0", resources=[ResourceUsage("cpu", 1)])
    assert isinstance(machine.resources, tuple)


# ---------------------------------------------------------------------------
# Allocation value objects
# ---------------------------------------------------------------------------

def test_allocation_metric_difference():
    metric = AllocationMetric(index=0, machine_name="m0", resource=ResourceKind.CPU, allocated=12, total_available=10)
    assert metric.difference == -2


def test_allocation_plan_defaults_to_empty():
    plan = AllocationPlan()
    assert plan.allocations == ()
    assert plan.new_allocations == ()
    assert plan.deallocations == ()
