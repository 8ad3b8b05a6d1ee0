# -*- coding: utf-8 -*-
"""
Machine model.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import StateValidationError
from .resources import ResourceKind, ResourceUsage, amount_of, kinds_of


@dataclass(frozen=True)
class Machine:
    """
    A machine offering a fixed capacity per resource kind.

    Attributes
    ----------
    name : str
        Unique identifier.
    resources : tuple[ResourceUsage, ...]
        Total capacity, one entry per resource kind. Every machine of a solve
        must list the same kinds in the same order (zero when unused).
    tag : str | None
        Optional free-form label (e.g. a hardware class).
    """
    name: str
    resources: Tuple[ResourceUsage, ...]
    tag: Optional[str] = None

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.name:
            raise StateValidationError("Machine.name must be non-empty.")
        object.__setattr__(self, "resources", tuple(self.resources))
        kinds = kinds_of(self.resources)
        if len(set(kinds)) != len(kinds):
            raise StateValidationError(f"Machine[{self.name}] lists a resource kind more than once.")

    @property
    def kinds(self) -> Tuple[ResourceKind, ...]:
        return kinds_of(self.resources)

    def capacity_of(self, kind: ResourceKind) -> int:
        return amount_of(self.resources, kind)

    def offers(self, kind: ResourceKind) -> bool:
        """True when the machine has a positive capacity of `kind`."""
        return any(r.requires(kind) for r in self.resources)
