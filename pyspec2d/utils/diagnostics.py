"""Diagnostic functions for pySpec2D.

This module reduces 2D spectra to radial (1D) power spectra and provides
the spectral normalisations and error norms used to check the operators
against analytic references.
"""

from typing import Optional, Tuple

import jax
import jax.numpy as jnp
import numpy as np

from ..validation import validate_matching_shapes, validate_tolerance


@jax.jit
def power_density(field_hat: jnp.ndarray) -> jnp.ndarray:
    """2D power array (|F| * 2/(Nx*Ny))² of a spectral field.

    Args:
        field_hat: Fourier coefficients, shape (Ny, Nx)

    Returns:
        Power in each mode
    """
    Ny, Nx = field_hat.shape
    return (jnp.abs(field_hat) * (2.0 / (Nx * Ny)))**2


@jax.jit
def normalized_amplitude(field_hat: jnp.ndarray) -> jnp.ndarray:
    """Amplitude |F| * 2/sqrt(Nx² + Ny²) of a spectral field."""
    Ny, Nx = field_hat.shape
    return jnp.abs(field_hat) * 2.0 / jnp.sqrt(float(Nx**2 + Ny**2))


def radial_power_spectrum(
    S: jnp.ndarray,
    Kmag: jnp.ndarray,
    tolerance: Optional[float] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Collapse a 2D spectral array onto wavenumber magnitude.

    Every distinct value of Kmag defines one radius, and S is averaged over
    all cells at that radius. Radii are grouped by exact floating-point
    equality, so two cells belong together only if their magnitudes compare
    bit-for-bit equal. That is sensitive to how Kmag was computed; pass an
    explicit ``tolerance`` to merge magnitudes that differ by round-off.

    Args:
        S: Real 2D array, e.g. power_density(field_hat)
        Kmag: Wavenumber magnitudes, same shape as S
        tolerance: If given, sorted magnitudes within ``tolerance`` of the
            smallest magnitude of the current group join that group, which
            is reported at its smallest magnitude

    Returns:
        S_vec: Average of S at each radius
        k_vec: Distinct radii in ascending order
    """
    validate_matching_shapes(S=S, Kmag=Kmag)
    if tolerance is not None:
        tolerance = validate_tolerance(tolerance)

    S_np = np.asarray(S, dtype=float).ravel()
    k_np = np.asarray(Kmag, dtype=float).ravel()

    # np.unique sorts and groups by equality
    k_vec, inverse = np.unique(k_np, return_inverse=True)
    inverse = inverse.ravel()

    if tolerance is not None:
        group_of_unique = np.empty(len(k_vec), dtype=np.intp)
        starts = []
        for i, k in enumerate(k_vec):
            if not starts or k - k_vec[starts[-1]] > tolerance:
                starts.append(i)
            group_of_unique[i] = len(starts) - 1
        inverse = group_of_unique[inverse]
        k_vec = k_vec[starts]

    sums = np.bincount(inverse, weights=S_np, minlength=len(k_vec))
    counts = np.bincount(inverse, minlength=len(k_vec))
    S_vec = sums / counts

    return S_vec, k_vec


def max_abs_error(approx: jnp.ndarray, exact: jnp.ndarray) -> float:
    """Maximum absolute pointwise difference between two fields."""
    validate_matching_shapes(approx=approx, exact=exact)
    return float(jnp.max(jnp.abs(jnp.asarray(approx) - jnp.asarray(exact))))
