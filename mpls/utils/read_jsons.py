# -*- coding: utf-8 -*-
"""
I/O helpers for loading allocation problem definitions.

This module includes lightweight JSON readers that match the
`problems/problem_*/{machines.json, containers.json, allocations.json}` structure.

JSON formats:
- machines.json    : [{"name": "...", "tag": "..."?, "resources": {"cpu": 10, "memory": 32}}, ...]
- containers.json  : [{"name": "...", "desired_instance_count": 3, "resources": {"cpu": 2, ...}}, ...]
- allocations.json : [{"machine": "<machine name>", "container": "<container name>"}, ...]

Resource keys are ResourceKind values ("cpu", "memory", "disk", "network", "gpu");
the key order of the object is the listing order.

These map directly to:
- business_objects.machines.Machine
- business_objects.containers.ContainerSpec
- business_objects.allocations.Allocation
"""

from __future__ import annotations
import json
from typing import List, Sequence, Tuple

from mpls.business_objects.allocations import Allocation
from mpls.business_objects.containers import ContainerSpec
from mpls.business_objects.errors import SchemaError
from mpls.business_objects.machines import Machine
from mpls.business_objects.resources import ResourceUsage


def _require(obj: dict, key: str, path: str) -> object:
    if key not in obj:
        raise SchemaError(f"{path}: missing required key '{key}' in object {obj}")
    return obj[key]


def _load_array(path: str) -> list:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception as e:
        raise SchemaError(f"{path}: failed to read/parse JSON: {e}") from e

    if not isinstance(data, list):
        raise SchemaError(f"{path}: expected a JSON array.")
    return data


def _read_resources(obj: dict, path: str) -> Tuple[ResourceUsage, ...]:
    resources = _require(obj, "resources", path)
    if not isinstance(resources, dict):
        raise SchemaError(f"{path}: 'resources' must be an object of kind -> amount.")
    return tuple(ResourceUsage(kind=kind, amount=amount) for kind, amount in resources.items())


def read_machines_json(path: str) -> List[Machine]:
    """
    Load machines from a JSON array. Each element must have:
      - name (str)
      - resources (object: kind -> nonnegative int)
    and may have:
      - tag (str)
    """
    machines: List[Machine] = []
    for idx, obj in enumerate(_load_array(path), start=1):
        if not isinstance(obj, dict):
            raise SchemaError(f"{path}[{idx}]: expected an object.")
        try:
            name = str(_require(obj, "name", path))
            tag = obj.get("tag")
            machines.append(
                Machine(
                    name=name,
                    resources=_read_resources(obj, path),
                    tag=None if tag is None else str(tag),
                )
            )
        except Exception as e:
            raise SchemaError(f"{path}[{idx}]: {e}") from e
    return machines


def read_containers_json(path: str) -> List[ContainerSpec]:
    """
    Load container specs from a JSON array. Each element must have:
      - name (str)
      - desired_instance_count (nonnegative int)
      - resources (object: kind -> nonnegative int)
    """
    containers: List[ContainerSpec] = []
    for idx, obj in enumerate(_load_array(path), start=1):
        if not isinstance(obj, dict):
            raise SchemaError(f"{path}[{idx}]: expected an object.")
        try:
            containers.append(
                ContainerSpec(
                    name=str(_require(obj, "name", path)),
                    resources=_read_resources(obj, path),
                    desired_instance_count=_require(obj, "desired_instance_count", path),
                )
            )
        except Exception as e:
            raise SchemaError(f"{path}[{idx}]: {e}") from e
    return containers


def read_allocations_json(
    path: str,
    machines: Sequence[Machine],
    containers: Sequence[ContainerSpec],
) -> List[Allocation]:
    """
    Load current allocations from a JSON array. Each element must have:
      - machine (str): name of one of `machines`
      - container (str): name of one of `containers`
    """
    machines_by_name = {m.name: m for m in machines}
    containers_by_name = {c.name: c for c in containers}

    allocations: List[Allocation] = []
    for idx, obj in enumerate(_load_array(path), start=1):
        if not isinstance(obj, dict):
            raise SchemaError(f"{path}[{idx}]: expected an object.")
        machine_name = str(_require(obj, "machine", path))
        container_name = str(_require(obj, "container", path))
        if machine_name not in machines_by_name:
            raise SchemaError(f"{path}[{idx}]: unknown machine '{machine_name}'.")
        if container_name not in containers_by_name:
            raise SchemaError(f"{path}[{idx}]: unknown container '{container_name}'.")
        allocations.append(
            Allocation(
                machine=machines_by_name[machine_name],
                container=containers_by_name[container_name],
            )
        )
    return allocations
