"""Tests for analytic test signals."""

import numpy as np
import jax
import jax.numpy as jnp
import pytest

from pyspec2d.core.grid import GridConfig, make_grid
from pyspec2d.core.operators import divergence, laplacian, x_derivative, y_derivative
from pyspec2d.exceptions import ConfigurationError
from pyspec2d.io import SignalConfig
from pyspec2d.signals import (
    beta_plane_source,
    gaussian_signal,
    make_signal,
    noisy_product_inputs,
    sine_signal,
)


@pytest.fixture
def grid():
    return make_grid(GridConfig(Lx=3000.0, Ly=2400.0, Nx=128, Ny=128, x_center=100.0, y_center=50.0))


class TestAnalyticSignals:
    """Analytic derivatives agree with the spectral ones."""

    @pytest.mark.parametrize("make", [
        lambda g: sine_signal(g, 2, 3),
        lambda g: gaussian_signal(g, 100.0),
    ])
    def test_references_match_operators(self, grid, make):
        signal = make(grid)
        scale = float(jnp.max(jnp.abs(signal.laplacian)))

        np.testing.assert_allclose(
            laplacian(signal.psi, grid.K, grid.L), signal.laplacian, atol=1e-8 * scale
        )
        for approx, exact in [
            (x_derivative(signal.psi, grid.K), signal.dpsidx),
            (y_derivative(signal.psi, grid.L), signal.dpsidy),
            (divergence(signal.psi, grid.K, grid.L), signal.div_psi),
        ]:
            np.testing.assert_allclose(
                approx, exact, atol=1e-8 * float(jnp.max(jnp.abs(exact)))
            )

    def test_gaussian_peak_at_center(self, grid):
        signal = gaussian_signal(grid, grid.Lx / 20)
        i, j = np.unravel_index(np.argmax(np.array(signal.psi)), grid.shape)

        assert abs(float(grid.x[j]) - 100.0) <= grid.dx
        assert abs(float(grid.y[i]) - 50.0) <= grid.dy

    def test_gaussian_rejects_bad_sigma(self, grid):
        with pytest.raises(ConfigurationError):
            gaussian_signal(grid, 0.0)

    def test_make_signal(self, grid):
        sine = make_signal(grid, SignalConfig(type="sine", modes_x=2, modes_y=1))
        np.testing.assert_allclose(sine.psi, sine_signal(grid, 2, 1).psi)

        gauss = make_signal(grid, SignalConfig(type="gaussian", sigma_fraction=0.1))
        np.testing.assert_allclose(gauss.psi, gaussian_signal(grid, 300.0).psi)


class TestNoisyInputs:
    """Tests for the de-aliasing inputs."""

    def test_noise_bounds(self, grid):
        ua, ub = noisy_product_inputs(grid, "sine_noise", 0.5, 1.0, jax.random.PRNGKey(1))
        base = sine_signal(grid).psi

        for u in (ua, ub):
            noise = np.array(u - base)
            assert noise.min() >= -1e-12
            assert noise.max() < 0.5 + 1e-12
        assert not np.allclose(ua, ub)

    def test_reproducible(self, grid):
        a = noisy_product_inputs(grid, "gaussian_noise", 0.5, 300.0, jax.random.PRNGKey(4))
        b = noisy_product_inputs(grid, "gaussian_noise", 0.5, 300.0, jax.random.PRNGKey(4))
        np.testing.assert_array_equal(a[0], b[0])
        np.testing.assert_array_equal(a[1], b[1])

    def test_unknown_kind(self, grid):
        with pytest.raises(ConfigurationError, match="Unknown nonlinear signal type"):
            noisy_product_inputs(grid, "square", 0.5, 1.0, jax.random.PRNGKey(0))


class TestBetaPlane:
    def test_source_has_linear_slope(self, grid):
        psi, q = beta_plane_source(grid, grid.Lx / 20, 1e-9)
        reference = gaussian_signal(grid, grid.Lx / 20)

        np.testing.assert_allclose(psi, reference.psi)
        np.testing.assert_allclose(q - reference.laplacian, -1e-9 * grid.Y, atol=1e-15)
