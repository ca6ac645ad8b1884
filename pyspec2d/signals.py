"""
Analytic test signals for checking the spectral operators.

Each signal carries its exact derivatives so operator output can be
compared against a reference. The Gaussian is not exactly periodic, so
its errors are bounded by truncation rather than round-off.
"""

from dataclasses import dataclass
from typing import Tuple

import jax
import jax.numpy as jnp

from pyspec2d.core.grid import Grid
from pyspec2d.exceptions import ConfigurationError


@dataclass
class AnalyticSignal:
    """A test field together with its analytic derivatives.

    Attributes:
        psi: The field itself
        dpsidx: ∂ψ/∂x
        dpsidy: ∂ψ/∂y
        div_psi: ∂ψ/∂x + ∂ψ/∂y
        laplacian: ∇²ψ
    """
    psi: jax.Array
    dpsidx: jax.Array
    dpsidy: jax.Array
    div_psi: jax.Array
    laplacian: jax.Array


def sine_signal(grid: Grid, modes_x: int = 1, modes_y: int = 1) -> AnalyticSignal:
    """ψ = sin(kx x) sin(ky y) with an integer number of periods per axis."""
    kx = 2.0 * jnp.pi * modes_x / grid.Lx
    ky = 2.0 * jnp.pi * modes_y / grid.Ly
    sx, cx = jnp.sin(kx * grid.X), jnp.cos(kx * grid.X)
    sy, cy = jnp.sin(ky * grid.Y), jnp.cos(ky * grid.Y)

    psi = sx * sy
    dpsidx = kx * cx * sy
    dpsidy = ky * sx * cy
    return AnalyticSignal(
        psi=psi,
        dpsidx=dpsidx,
        dpsidy=dpsidy,
        div_psi=dpsidx + dpsidy,
        laplacian=-(kx**2 + ky**2) * psi,
    )


def _gaussian(grid: Grid, sigma: float) -> Tuple[jax.Array, jax.Array, jax.Array]:
    xr = grid.X - grid.config.x_center
    yr = grid.Y - grid.config.y_center
    psi = jnp.exp(-(xr**2 + yr**2) / (2.0 * sigma**2))
    return psi, xr, yr


def gaussian_signal(grid: Grid, sigma: float) -> AnalyticSignal:
    """Gaussian bump of width sigma centred on the domain centre."""
    if sigma <= 0:
        raise ConfigurationError(f"sigma must be positive, got {sigma}")

    psi, xr, yr = _gaussian(grid, sigma)
    return AnalyticSignal(
        psi=psi,
        dpsidx=-xr * psi / sigma**2,
        dpsidy=-yr * psi / sigma**2,
        div_psi=-(xr + yr) * psi / sigma**2,
        laplacian=psi * ((xr**2 + yr**2) / sigma**4 - 2.0 / sigma**2),
    )


def make_signal(grid: Grid, config) -> AnalyticSignal:
    """Build the test signal described by a SignalConfig."""
    if config.type == "sine":
        return sine_signal(grid, config.modes_x, config.modes_y)
    elif config.type == "gaussian":
        return gaussian_signal(grid, config.sigma_fraction * grid.Lx)
    else:
        raise ConfigurationError(f"Unknown signal type: {config.type}")


def noisy_product_inputs(
    grid: Grid,
    kind: str,
    noise_amplitude: float,
    sigma: float,
    key: jax.Array,
) -> Tuple[jax.Array, jax.Array]:
    """
    Two fields for the de-aliasing check: a smooth signal plus noise.

    Parameters:
        grid: Grid object
        kind: 'sine_noise' (single-period sine waves) or 'gaussian_noise'
        noise_amplitude: Noise is uniform in [0, noise_amplitude)
        sigma: Gaussian width, used for 'gaussian_noise'
        key: JAX PRNG key

    Returns:
        (ua, ub): Independent noisy realisations of the same signal
    """
    if kind == "sine_noise":
        base = sine_signal(grid).psi
    elif kind == "gaussian_noise":
        base, _, _ = _gaussian(grid, sigma)
    else:
        raise ConfigurationError(f"Unknown nonlinear signal type: {kind}")

    key_a, key_b = jax.random.split(key)
    ua = base + noise_amplitude * jax.random.uniform(key_a, grid.shape)
    ub = base + noise_amplitude * jax.random.uniform(key_b, grid.shape)
    return ua, ub


def beta_plane_source(grid: Grid, sigma: float, beta: float) -> Tuple[jax.Array, jax.Array]:
    """
    Gaussian streamfunction on a linear background slope.

    Returns:
        (psi, q): The Gaussian and the source q = ∇²psi - beta*y
    """
    signal = gaussian_signal(grid, sigma)
    return signal.psi, signal.laplacian - beta * grid.Y
