# -*- coding: utf-8 -*-
"""
Demo fleet construction.

A FleetTemplate describes one batch of identical machines or container specs;
`with_*` methods return updated copies, so one template can seed several
batches:

    small = FleetTemplate().with_resource("cpu", 5).with_resource("memory", 5)
    machines = build_machines(51, small, start=93)
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple, Union

from mpls.business_objects.containers import ContainerSpec
from mpls.business_objects.errors import StateValidationError
from mpls.business_objects.machines import Machine
from mpls.business_objects.resources import ResourceKind, ResourceUsage

DEFAULT_MACHINE_RESOURCES: Tuple[Tuple[ResourceKind, int], ...] = (
    (ResourceKind.CPU, 100),
    (ResourceKind.MEMORY, 100),
)
DEFAULT_CONTAINER_RESOURCES: Tuple[Tuple[ResourceKind, int], ...] = (
    (ResourceKind.CPU, 5),
    (ResourceKind.MEMORY, 10),
)


@dataclass(frozen=True)
class FleetTemplate:
    """
    Attributes
    ----------
    resources : tuple[(ResourceKind, int), ...]
        Capacity (machines) or per-instance demand (containers), in listing order.
    instance_count : int
        Desired instance count of every container spec built from the template.
    tag : str | None
        Tag of every machine built from the template.
    """
    resources: Tuple[Tuple[ResourceKind, int], ...] = field(default=DEFAULT_MACHINE_RESOURCES)
    instance_count: int = 1
    tag: Optional[str] = None

    def with_resource(self, kind: Union[ResourceKind, str], amount: int) -> "FleetTemplate":
        """Set `kind` in place if listed, else append it."""
        kind = ResourceKind(kind)
        updated = [(k, amount if k == kind else a) for k, a in self.resources]
        if all(k != kind for k, _ in self.resources):
            updated.append((kind, amount))
        return replace(self, resources=tuple(updated))

    def without_resources(self) -> "FleetTemplate":
        return replace(self, resources=())

    def with_instance_count(self, count: int) -> "FleetTemplate":
        return replace(self, instance_count=count)

    def with_tag(self, tag: Optional[str]) -> "FleetTemplate":
        return replace(self, tag=tag)

    def usages(self) -> Tuple[ResourceUsage, ...]:
        return tuple(ResourceUsage(kind=k, amount=a) for k, a in self.resources)


def _check_count(count: int) -> None:
    if count < 0:
        raise StateValidationError(f"count must be >= 0, got {count}.")


def build_machines(
    count: int,
    template: Optional[FleetTemplate] = None,
    prefix: str = "machine",
    start: int = 0,
) -> List[Machine]:
    """`count` identical machines named `{prefix}-{start}`, `{prefix}-{start + 1}`, ..."""
    _check_count(count)
    template = template or FleetTemplate()
    usages = template.usages()
    return [
        Machine(name=f"{prefix}-{start + i}", resources=usages, tag=template.tag)
        for i in range(count)
    ]


def build_containers(
    count: int,
    template: Optional[FleetTemplate] = None,
    prefix: str = "container",
    start: int = 0,
) -> List[ContainerSpec]:
    """`count` identical container specs, named like `build_machines` names machines."""
    _check_count(count)
    template = template or FleetTemplate(resources=DEFAULT_CONTAINER_RESOURCES, instance_count=8)
    usages = template.usages()
    return [
        ContainerSpec(
            name=f"{prefix}-{start + i}",
            resources=usages,
            desired_instance_count=template.instance_count,
        )
        for i in range(count)
    ]
