"""
Custom exceptions for pySpec2D.

Configuration and validation errors also derive from ValueError so that
callers catching the builtin keep working.
"""


class pySpec2DError(Exception):
    """Base exception for all pySpec2D errors."""
    pass


class ConfigurationError(pySpec2DError, ValueError):
    """Raised when grid or run configuration parameters are invalid."""
    pass


class ValidationError(pySpec2DError, ValueError):
    """Raised when parameter validation fails."""
    pass


class ShapeMismatchError(ValidationError):
    """Raised when arrays disagree with each other or with the wavenumber grids."""
    pass
