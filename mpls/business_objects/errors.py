# -*- coding: utf-8 -*-
"""
Common exceptions for the business objects layer.
"""


class SchemaError(ValueError):
    """Raised when a problem file (JSON) violates the expected schema."""


class StateValidationError(ValueError):
    """Raised when machines, containers or solver parameters violate domain constraints."""
