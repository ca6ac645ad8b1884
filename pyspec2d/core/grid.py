"""
Grid management for 2D spectral computations.

This module provides the GridConfig and Grid types together with the
wavenumber construction and FFT wrappers used by every spectral operator
on a doubly-periodic rectangular domain.
"""

from dataclasses import dataclass
from functools import partial
from typing import Tuple

import jax
import jax.numpy as jnp
from jax.tree_util import register_pytree_node

from pyspec2d.validation import validate_domain_size, validate_grid_size


@dataclass(frozen=True)
class GridConfig:
    """Immutable description of a uniform periodic domain.

    Attributes:
        Lx: Domain size in x
        Ly: Domain size in y
        Nx: Number of samples in x (even, >= 2)
        Ny: Number of samples in y (even, >= 2)
        x_center: x coordinate of the domain centre
        y_center: y coordinate of the domain centre
    """
    Lx: float = 3000.0
    Ly: float = 3000.0
    Nx: int = 128
    Ny: int = 128
    x_center: float = 0.0
    y_center: float = 0.0

    def __post_init__(self):
        # Normalise to plain Python scalars so configs hash consistently
        object.__setattr__(self, "Nx", validate_grid_size(self.Nx, "Nx"))
        object.__setattr__(self, "Ny", validate_grid_size(self.Ny, "Ny"))
        object.__setattr__(self, "Lx", validate_domain_size(self.Lx, "Lx"))
        object.__setattr__(self, "Ly", validate_domain_size(self.Ly, "Ly"))
        object.__setattr__(self, "x_center", float(self.x_center))
        object.__setattr__(self, "y_center", float(self.y_center))


class Grid:
    """
    Physical and spectral grids for a 2D periodic domain.

    This class is registered as a JAX pytree so it can be passed through
    jitted functions. All 2D arrays have shape (Ny, Nx): x varies along
    columns and y along rows.

    Attributes:
        config: GridConfig the grid was built from
        x: Cell-centred x coordinates, shape (Nx,)
        y: Cell-centred y coordinates, shape (Ny,)
        X: Physical x coordinates, shape (Ny, Nx)
        Y: Physical y coordinates, shape (Ny, Nx)
        k: Angular wavenumbers in x, shape (Nx,)
        l: Angular wavenumbers in y, shape (Ny,)
        K: x wavenumber of each mode, shape (Ny, Nx)
        L: y wavenumber of each mode, shape (Ny, Nx)
        Kmag: Wavenumber magnitude sqrt(K² + L²)
        Kinv: K with the [0, 0] entry replaced by +inf
        Linv: L with the [0, 0] entry replaced by +inf
    """

    def __init__(self, config: GridConfig, x: jax.Array, y: jax.Array,
                 X: jax.Array, Y: jax.Array, k: jax.Array, l: jax.Array,
                 K: jax.Array, L: jax.Array, Kmag: jax.Array,
                 Kinv: jax.Array, Linv: jax.Array):
        self.config = config
        self.x = x
        self.y = y
        self.X = X
        self.Y = Y
        self.k = k
        self.l = l
        self.K = K
        self.L = L
        self.Kmag = Kmag
        self.Kinv = Kinv
        self.Linv = Linv

    @property
    def Nx(self) -> int:
        return self.config.Nx

    @property
    def Ny(self) -> int:
        return self.config.Ny

    @property
    def Lx(self) -> float:
        return self.config.Lx

    @property
    def Ly(self) -> float:
        return self.config.Ly

    @property
    def dx(self) -> float:
        return self.config.Lx / self.config.Nx

    @property
    def dy(self) -> float:
        return self.config.Ly / self.config.Ny

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.config.Ny, self.config.Nx)

    def tree_flatten(self) -> Tuple[list, GridConfig]:
        """Flatten Grid into JAX-compatible format."""
        children = [self.x, self.y, self.X, self.Y, self.k, self.l,
                    self.K, self.L, self.Kmag, self.Kinv, self.Linv]
        return children, self.config

    @classmethod
    def tree_unflatten(cls, config: GridConfig, children: list) -> 'Grid':
        """Reconstruct Grid from flattened representation."""
        return cls(config, *children)


register_pytree_node(
    Grid,
    Grid.tree_flatten,
    Grid.tree_unflatten
)


def wavenumbers(N: int, L: float) -> jax.Array:
    """
    Angular wavenumbers for an N-point periodic axis of length L.

    Ordering is [0, 1, ..., N/2, -(N/2 - 1), ..., -1] * 2π/L. Unlike
    numpy.fft.fftfreq the Nyquist entry at index N/2 is positive.

    Parameters:
        N: Number of samples (even)
        L: Axis length

    Returns:
        Wavenumbers in radians per unit length, shape (N,)
    """
    N = validate_grid_size(N, "N")
    L = validate_domain_size(L, "L")

    positive = jnp.arange(N // 2 + 1)
    negative = -jnp.arange(N // 2 - 1, 0, -1)
    return jnp.concatenate([positive, negative]) * (2.0 * jnp.pi / L)


@partial(jax.jit, static_argnums=(0,))
def make_grid(config: GridConfig) -> Grid:
    """
    Create a Grid object for spectral computations.

    Parameters:
        config: Validated domain description

    Returns:
        Grid object with all coordinate and wavenumber arrays
    """
    Nx, Ny = config.Nx, config.Ny
    dx = config.Lx / Nx
    dy = config.Ly / Ny

    # Cell-centred coordinates, symmetric about the domain centre
    x = (jnp.arange(Nx) + 0.5) * dx - (config.Lx / 2.0 - config.x_center)
    y = (jnp.arange(Ny) + 0.5) * dy - (config.Ly / 2.0 - config.y_center)
    X, Y = jnp.meshgrid(x, y)

    k = wavenumbers(Nx, config.Lx)
    l = wavenumbers(Ny, config.Ly)
    K, L = jnp.meshgrid(k, l)

    Kmag = jnp.sqrt(K**2 + L**2)

    # Infinite DC entries make the reciprocal used in spectral inversion vanish
    Kinv = K.at[0, 0].set(jnp.inf)
    Linv = L.at[0, 0].set(jnp.inf)

    return Grid(config, x, y, X, Y, k, l, K, L, Kmag, Kinv, Linv)


@jax.jit
def fft2(field: jax.Array) -> jax.Array:
    """
    2D Fast Fourier Transform over both axes.

    Parameters:
        field: Real-space field, shape (Ny, Nx)

    Returns:
        Fourier coefficients, shape (Ny, Nx)
    """
    return jnp.fft.fft2(field)


@jax.jit
def ifft2(field_hat: jax.Array) -> jax.Array:
    """
    2D Inverse Fast Fourier Transform, real part.

    Parameters:
        field_hat: Fourier coefficients, shape (Ny, Nx)

    Returns:
        Real-space field, shape (Ny, Nx)
    """
    return jnp.fft.ifft2(field_hat).real
