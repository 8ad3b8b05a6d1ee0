# -*- coding: utf-8 -*-
import json
from pathlib import Path

import pytest

from mpls.business_objects import ResourceKind, SchemaError
from mpls.utils.read_jsons import read_allocations_json, read_containers_json, read_machines_json

PROBLEM_1 = Path(__file__).resolve().parents[1] / "problems" / "problem_1"


def _write(tmp_path, name, payload) -> str:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_read_machines(tmp_path):
    path = _write(
        tmp_path,
        "machines.json",
        [
            {"name": "m0", "tag": "big", "resources": {"memory": 64, "cpu": 16}},
            {"name": "m1", "resources": {"memory": 32, "cpu": 8}},
        ],
    )
    machines = read_machines_json(path)

    assert [m.name for m in machines] == ["m0", "m1"]
    assert machines[0].tag == "big"
    assert machines[1].tag is None
    assert machines[0].kinds == (ResourceKind.MEMORY, ResourceKind.CPU)
    assert machines[1].capacity_of(ResourceKind.CPU) == 8


def test_read_containers(tmp_path):
    path = _write(
        tmp_path,
        "containers.json",
        [{"name": "web", "desired_instance_count": 3, "resources": {"cpu": 2, "memory": 4}}],
    )
    (spec,) = read_containers_json(path)
    assert spec.name == "web"
    assert spec.desired_instance_count == 3
    assert spec.demand_of(ResourceKind.MEMORY) == 4


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "m0"},
        [{"resources": {"cpu": 1}}],
        [{"name": "m0", "resources": [1, 2]}],
        [{"name": "m0", "resources": {"cpu": -1}}],
        [{"name": "m0", "resources": {"tpu": 1}}],
        ["m0"],
    ],
)
def test_read_machines_schema_errors(tmp_path, payload):
    with pytest.raises(SchemaError):
        read_machines_json(_write(tmp_path, "machines.json", payload))


def test_read_containers_requires_instance_count(tmp_path):
    path = _write(tmp_path, "containers.json", [{"name": "web", "resources": {"cpu": 1}}])
    with pytest.raises(SchemaError):
        read_containers_json(path)


def test_unreadable_json_is_a_schema_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(SchemaError):
        read_machines_json(str(path))
    with pytest.raises(SchemaError):
        read_containers_json(str(tmp_path / "missing.json"))


def test_read_allocations_resolves_names(tmp_path, make_machine, make_container):
    machines = [make_machine("m0"), make_machine("m1")]
    containers = [make_container("web")]
    path = _write(tmp_path, "allocations.json", [{"machine": "m1", "container": "web"}])

    (allocation,) = read_allocations_json(path, machines, containers)
    assert allocation.machine is machines[1]
    assert allocation.container is containers[0]


@pytest.mark.parametrize(
    "entry",
    [{"machine": "nope", "container": "web"}, {"machine": "m0", "container": "nope"}, {"machine": "m0"}],
)
def test_read_allocations_rejects_unknown_or_missing_names(tmp_path, make_machine, make_container, entry):
    path = _write(tmp_path, "allocations.json", [entry])
    with pytest.raises(SchemaError):
        read_allocations_json(path, [make_machine("m0")], [make_container("web")])


def test_bundled_problem_loads():
    machines = read_machines_json(str(PROBLEM_1 / "machines.json"))
    containers = read_containers_json(str(PROBLEM_1 / "containers.json"))
    allocations = read_allocations_json(str(PROBLEM_1 / "allocations.json"), machines, containers)

    assert len(machines) == 5
    assert len(containers) == 4
    assert len(allocations) == 6
