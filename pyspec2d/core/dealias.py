"""
2/3-rule de-aliasing of quadratic products.

Multiplying two band-limited fields in physical space creates modes above
the Nyquist limit that fold back onto resolved wavenumbers. Truncating the
top third of the resolved range in both factors before multiplying keeps
every mode below the cutoff free of that aliasing error.

The filter works on private copies of its inputs: the caller's spectra are
never modified and may be reused after the call.
"""

import jax
import jax.numpy as jnp

from pyspec2d.core.grid import fft2, ifft2
from pyspec2d.exceptions import ShapeMismatchError
from pyspec2d.validation import validate_matching_shapes


def dealias_cutoff(Kmag: jax.Array) -> float:
    """
    Wavenumber magnitude at and above which modes are truncated.

    The cutoff is 2/3 of the Nyquist magnitude of the coarser axis,
    min(Nx, Ny)/3 * dk, where dk = Kmag[0, 1] is the fundamental step.

    Parameters:
        Kmag: Wavenumber magnitudes, shape (Ny, Nx) with Nx >= 2

    Returns:
        Cutoff magnitude
    """
    Ny, Nx = validate_matching_shapes(Kmag=Kmag)
    if Nx < 2:
        raise ShapeMismatchError(f"Kmag needs at least 2 columns to define dk, got shape {(Ny, Nx)}")

    dk = float(Kmag[0, 1])
    return min(Nx, Ny) / 3.0 * dk


def dealias_mask(Kmag: jax.Array) -> jax.Array:
    """
    Boolean mask of the modes kept by the 2/3 rule.

    Parameters:
        Kmag: Wavenumber magnitudes, shape (Ny, Nx)

    Returns:
        True where |Kmag| is below the cutoff
    """
    cutoff = dealias_cutoff(Kmag)
    return jnp.abs(jnp.asarray(Kmag)) < cutoff


@jax.jit
def _filtered_product(U: jax.Array, V: jax.Array, mask: jax.Array) -> jax.Array:
    """Zero masked-out modes of U and V and multiply in physical space."""
    U_filtered = jnp.where(mask, U, 0.0)
    V_filtered = jnp.where(mask, V, 0.0)
    return ifft2(U_filtered) * ifft2(V_filtered)


@jax.jit
def _truncate(field: jax.Array, mask: jax.Array) -> jax.Array:
    """Remove masked-out modes from a physical field."""
    return ifft2(jnp.where(mask, fft2(field), 0.0))


def dealias_product(
    U: jax.Array,
    V: jax.Array,
    Kmag: jax.Array,
    truncate_product: bool = False,
) -> jax.Array:
    """
    De-aliased pointwise product of two fields given by their spectra.

    Both spectra are zeroed wherever |Kmag| >= dealias_cutoff(Kmag), brought
    back to physical space and multiplied. The result is a smoothed
    approximation of u*v, not the product of the unfiltered fields.

    Parameters:
        U: Spectrum of the first real field, shape (Ny, Nx)
        V: Spectrum of the second real field, shape (Ny, Nx)
        Kmag: Wavenumber magnitudes, shape (Ny, Nx)
        truncate_product: Also strip modes at or above the cutoff from the
            product itself, leaving no energy in the truncated band

    Returns:
        The de-aliased product in physical space
    """
    validate_matching_shapes(U=U, V=V, Kmag=Kmag)
    mask = dealias_mask(Kmag)

    product = _filtered_product(jnp.asarray(U), jnp.asarray(V), mask)
    if truncate_product:
        product = _truncate(product, mask)

    return product
