# -*- coding: utf-8 -*-
"""
Container spec model.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .errors import StateValidationError
from .resources import ResourceKind, ResourceUsage, amount_of, kinds_of


@dataclass(frozen=True)
class ContainerSpec:
    """
    A replicated workload: per-instance demand plus a desired replica count.

    Attributes
    ----------
    name : str
        Unique identifier.
    resources : tuple[ResourceUsage, ...]
        Demand of a single instance, one entry per resource kind.
    desired_instance_count : int
        Number of instances to place (at most one per machine).
    """
    name: str
    resources: Tuple[ResourceUsage, ...]
    desired_instance_count: int = 1

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.name:
            raise StateValidationError("ContainerSpec.name must be non-empty.")
        object.__setattr__(self, "resources", tuple(self.resources))
        kinds = kinds_of(self.resources)
        if len(set(kinds)) != len(kinds):
            raise StateValidationError(f"ContainerSpec[{self.name}] lists a resource kind more than once.")
        if isinstance(self.desired_instance_count, bool) or not isinstance(self.desired_instance_count, int):
            raise StateValidationError(f"ContainerSpec[{self.name}] desired_instance_count must be an integer.")
        if self.desired_instance_count < 0:
            raise StateValidationError(f"ContainerSpec[{self.name}] desired_instance_count must be >= 0.")

    @property
    def kinds(self) -> Tuple[ResourceKind, ...]:
        return kinds_of(self.resources)

    def demand_of(self, kind: ResourceKind) -> int:
        return amount_of(self.resources, kind)

    def requires(self, kind: ResourceKind) -> bool:
        return any(r.requires(kind) for r in self.resources)
