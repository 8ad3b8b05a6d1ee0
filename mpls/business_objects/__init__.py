# -*- coding: utf-8 -*-
"""
Public exports for the business objects layer.
"""

from .errors import SchemaError, StateValidationError
from .resources import ResourceKind, ResourceUsage
from .machines import Machine
from .containers import ContainerSpec
from .allocations import Allocation, AllocationMetric, AllocationPlan

__all__ = [
    # errors
    "SchemaError",
    "StateValidationError",
    # core models
    "ResourceKind",
    "ResourceUsage",
    "Machine",
    "ContainerSpec",
    "Allocation",
    "AllocationMetric",
    "AllocationPlan",
]
