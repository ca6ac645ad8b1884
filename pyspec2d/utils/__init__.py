"""Utilities module for pySpec2D.

This module provides spectral diagnostics and logging for verification runs.
"""

from .diagnostics import (
    max_abs_error,
    normalized_amplitude,
    power_density,
    radial_power_spectrum,
)
from .logging import (
    RunLogger,
    setup_logging,
)

__all__ = [
    # Diagnostics
    "radial_power_spectrum",
    "power_density",
    "normalized_amplitude",
    "max_abs_error",
    # Logging
    "RunLogger",
    "setup_logging",
]
