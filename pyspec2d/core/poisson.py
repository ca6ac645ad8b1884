"""
Spectral Poisson solver for doubly-periodic 2D domains.

Solves ∇²ψ = q by dividing the spectrum of q by -(K² + L²). The mean of ψ
is undetermined on a periodic domain and is fixed to zero: the inversion
grids carry +inf at the DC entry, so its reciprocal is exactly zero.
"""

import jax
import jax.numpy as jnp

from pyspec2d.core.grid import fft2, ifft2
from pyspec2d.validation import validate_matching_shapes


@jax.jit
def _invert_laplacian(q: jax.Array, Kinv: jax.Array, Linv: jax.Array) -> jax.Array:
    """Return Re ifft2(-fft2(q) / (Kinv² + Linv²))."""
    # Real reciprocal first: 1/inf -> 0 at DC, no complex inf/inf
    inverse_k2 = 1.0 / (Kinv**2 + Linv**2)
    return ifft2(-fft2(q) * inverse_k2)


def poisson_solve(q: jax.Array, Kinv: jax.Array, Linv: jax.Array) -> jax.Array:
    """
    Solve ∇²ψ = q for the zero-mean potential ψ.

    A non-zero mean of q cannot be represented by a periodic ψ and is
    discarded, so ∇²ψ reproduces q - mean(q).

    Parameters:
        q: Source field (the Laplacian of ψ), shape (Ny, Nx)
        Kinv: x wavenumbers with +inf at [0, 0], shape (Ny, Nx)
        Linv: y wavenumbers with +inf at [0, 0], shape (Ny, Nx)

    Returns:
        psi: Zero-mean potential in physical space
    """
    validate_matching_shapes(q=q, Kinv=Kinv, Linv=Linv)
    return _invert_laplacian(jnp.asarray(q), jnp.asarray(Kinv), jnp.asarray(Linv))
