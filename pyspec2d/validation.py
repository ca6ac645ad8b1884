"""
Parameter validation utilities for pySpec2D.

Every public operator validates its inputs here before any transform is
performed, so a failure never leaves a partial result behind.
"""

from typing import Tuple

import numpy as np

from pyspec2d.exceptions import ConfigurationError, ShapeMismatchError, ValidationError


def validate_grid_size(N: int, name: str = "N") -> int:
    """Validate a sample count is an even integer >= 2.

    Args:
        N: Number of grid points along one axis
        name: Parameter name for error messages

    Returns:
        Validated sample count as a Python int

    Raises:
        ConfigurationError: If the sample count is invalid
    """
    if isinstance(N, bool) or not isinstance(N, (int, np.integer)):
        raise ConfigurationError(f"{name} must be an integer, got {type(N).__name__}")

    N = int(N)

    if N <= 0:
        raise ConfigurationError(f"{name} must be positive, got {N}")

    if N % 2 != 0:
        raise ConfigurationError(f"{name} must be even, got {N}")

    return N


def validate_domain_size(length: float, name: str = "L") -> float:
    """Validate a domain length is a finite positive number.

    Args:
        length: Domain size along one axis
        name: Parameter name for error messages

    Returns:
        Validated domain size as a Python float

    Raises:
        ConfigurationError: If the domain size is invalid
    """
    if isinstance(length, bool) or not isinstance(length, (float, int, np.floating, np.integer)):
        raise ConfigurationError(f"{name} must be numeric, got {type(length).__name__}")

    length = float(length)

    if not np.isfinite(length) or length <= 0:
        raise ConfigurationError(f"{name} must be positive, got {length}")

    return length


def validate_matching_shapes(**arrays) -> Tuple[int, int]:
    """Validate that all named arrays are 2D and share one shape.

    Keyword order is preserved, so the first array is the reference that
    the others are reported against.

    Returns:
        The common (Ny, Nx) shape

    Raises:
        ShapeMismatchError: If any array is not 2D or shapes disagree
    """
    shape = None
    reference = None

    for name, array in arrays.items():
        if not hasattr(array, "shape"):
            raise ShapeMismatchError(f"{name} must be an array, got {type(array).__name__}")

        if len(array.shape) != 2:
            raise ShapeMismatchError(f"{name} must be 2D, got shape {tuple(array.shape)}")

        if shape is None:
            shape, reference = tuple(array.shape), name
        elif tuple(array.shape) != shape:
            raise ShapeMismatchError(
                f"{name} has shape {tuple(array.shape)}, expected {shape} to match {reference}"
            )

    return shape


def validate_tolerance(tolerance: float, name: str = "tolerance") -> float:
    """Validate a grouping tolerance is a finite non-negative number.

    Raises:
        ValidationError: If the tolerance is invalid
    """
    if isinstance(tolerance, bool) or not isinstance(
        tolerance, (float, int, np.floating, np.integer)
    ):
        raise ValidationError(f"{name} must be numeric, got {type(tolerance).__name__}")

    tolerance = float(tolerance)

    if not np.isfinite(tolerance) or tolerance < 0:
        raise ValidationError(f"{name} must be non-negative, got {tolerance}")

    return tolerance
