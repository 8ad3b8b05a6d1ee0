# -*- coding: utf-8 -*-
"""
Resource model: resource kinds and typed resource quantities.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

from .errors import StateValidationError


class ResourceKind(str, Enum):
    """A resource dimension offered by machines and consumed by containers."""
    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    NETWORK = "network"
    GPU = "gpu"


@dataclass(frozen=True)
class ResourceUsage:
    """
    An amount of a single resource kind.

    Used both as machine capacity and as per-instance container demand.

    Attributes
    ----------
    kind : ResourceKind
        Resource dimension.
    amount : int
        Nonnegative integer quantity.
    """
    kind: ResourceKind
    amount: int

    def __post_init__(self) -> None:  # type: ignore[override]
        if not isinstance(self.kind, ResourceKind):
            try:
                object.__setattr__(self, "kind", ResourceKind(self.kind))
            except ValueError as e:
                raise StateValidationError(f"Unknown resource kind: {self.kind!r}") from e
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise StateValidationError(f"ResourceUsage[{self.kind.value}] amount must be an integer.")
        if self.amount < 0:
            raise StateValidationError(f"ResourceUsage[{self.kind.value}] amount must be >= 0.")

    def requires(self, kind: ResourceKind) -> bool:
        """True when this usage is of `kind` and asks for a positive amount."""
        return self.kind == kind and self.amount > 0


def amount_of(usages: Iterable[ResourceUsage], kind: ResourceKind) -> int:
    """Total amount of `kind` across `usages` (0 if the kind is not listed)."""
    return sum(u.amount for u in usages if u.kind == kind)


def kinds_of(usages: Iterable[ResourceUsage]) -> Tuple[ResourceKind, ...]:
    return tuple(u.kind for u in usages)
