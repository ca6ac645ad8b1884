"""
pySpec2D: spectral derivatives, Poisson inversion and 2/3-rule de-aliasing
on doubly-periodic 2D grids, built on JAX.
"""

__version__ = "0.1.0"
__author__ = "pySpec2D Developers"

import re
import warnings

import jax

MIN_JAX_VERSION = (0, 4)


def _version_tuple(version: str) -> tuple:
    """Leading (major, minor) of a version string, e.g. '0.4.30.dev1' -> (0, 4)."""
    parts = []
    for part in version.split(".")[:2]:
        match = re.match(r"\d+", part)
        parts.append(int(match.group()) if match else 0)
    return tuple(parts)


if not hasattr(jax, "__version__") or _version_tuple(jax.__version__) < MIN_JAX_VERSION:
    warnings.warn(
        "pySpec2D requires JAX >= 0.4.0. " "Please upgrade with: pip install --upgrade jax",
        RuntimeWarning,
        stacklevel=2,
    )

# Enable double precision by default
jax.config.update("jax_enable_x64", True)
