# -*- coding: utf-8 -*-
import pytest

from mpls.business_objects import ResourceKind, StateValidationError
from mpls.utils.fleet import FleetTemplate, build_containers, build_machines


def test_with_resource_replaces_or_appends():
    template = FleetTemplate().with_resource("cpu", 20).with_resource("gpu", 1)
    assert template.resources == (
        (ResourceKind.CPU, 20),
        (ResourceKind.MEMORY, 100),
        (ResourceKind.GPU, 1),
    )
    # templates are immutable; the default is untouched
    assert FleetTemplate().resources == ((ResourceKind.CPU, 100), (ResourceKind.MEMORY, 100))


def test_build_machines_is_deterministic():
    template = FleetTemplate().with_tag("small").with_resource("cpu", 5)
    machines = build_machines(3, template, start=10)

    assert [m.name for m in machines] == ["machine-10", "machine-11", "machine-12"]
    assert all(m.tag == "small" for m in machines)
    assert machines[0].capacity_of(ResourceKind.CPU) == 5
    assert [m.name for m in build_machines(3, template, start=10)] == [m.name for m in machines]


def test_build_containers_defaults():
    (spec,) = build_containers(1)
    assert spec.name == "container-0"
    assert spec.desired_instance_count == 8
    assert spec.demand_of(ResourceKind.CPU) == 5
    assert spec.demand_of(ResourceKind.MEMORY) == 10


def test_without_resources_then_rebuild():
    template = FleetTemplate().without_resources().with_resource("memory", 4).with_instance_count(2)
    (spec,) = build_containers(1, template, prefix="cache")
    assert spec.name == "cache-0"
    assert spec.kinds == (ResourceKind.MEMORY,)
    assert spec.desired_instance_count == 2


def test_negative_count_is_rejected():
    with pytest.raises(StateValidationError):
        build_machines(-1)
