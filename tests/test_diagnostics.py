"""Tests for radial spectra and error diagnostics."""

import numpy as np
import jax.numpy as jnp
import pytest

from pyspec2d.core.grid import GridConfig, fft2, make_grid
from pyspec2d.exceptions import ShapeMismatchError, ValidationError
from pyspec2d.utils.diagnostics import (
    max_abs_error,
    normalized_amplitude,
    power_density,
    radial_power_spectrum,
)


# Wavenumber magnitudes of a 4 x 4 grid on a 2π x 2π domain:
# k = l = [0, 1, 2, -1]
R2, R5, R8 = np.sqrt(2.0), np.sqrt(5.0), np.sqrt(8.0)
KMAG_4x4 = np.array([
    [0.0, 1.0, 2.0, 1.0],
    [1.0, R2, R5, R2],
    [2.0, R5, R8, R5],
    [1.0, R2, R5, R2],
])


class TestRadialPowerSpectrum:
    """Tests for radial_power_spectrum."""

    def test_literal_4x4_table(self):
        """Averages over cells sharing each magnitude."""
        S = np.arange(16, dtype=float).reshape(4, 4)
        S_vec, k_vec = radial_power_spectrum(S, KMAG_4x4)

        np.testing.assert_array_equal(k_vec, [0.0, 1.0, R2, 2.0, R5, R8])
        # 0: {0}; 1: {1, 3, 4, 12}; √2: {5, 7, 13, 15}; 2: {2, 8};
        # √5: {6, 9, 11, 14}; √8: {10}
        np.testing.assert_allclose(S_vec, [0.0, 5.0, 10.0, 5.0, 10.0, 10.0])

    def test_matches_grid_kmag(self):
        """make_grid produces exactly the literal 4 x 4 table."""
        grid = make_grid(GridConfig(Lx=2 * np.pi, Ly=2 * np.pi, Nx=4, Ny=4))
        np.testing.assert_array_equal(grid.Kmag, KMAG_4x4)

        S_vec, k_vec = radial_power_spectrum(np.ones((4, 4)), grid.Kmag)
        assert len(k_vec) == 6
        np.testing.assert_array_equal(S_vec, np.ones(6))

    def test_output_shorter_than_grid(self):
        """Symmetric wavenumbers give fewer radii than cells."""
        grid = make_grid(GridConfig(Nx=32, Ny=32))
        S_vec, k_vec = radial_power_spectrum(jnp.ones(grid.shape), grid.Kmag)

        assert len(S_vec) == len(k_vec)
        assert len(k_vec) == len(np.unique(np.array(grid.Kmag)))
        assert len(k_vec) < 32 * 32
        assert np.all(np.diff(k_vec) > 0)

    def test_singleton_groups(self):
        """Distinct magnitudes return S unchanged, sorted by magnitude."""
        Kmag = np.array([[3.0, 1.0], [2.0, 0.0]])
        S = np.array([[30.0, 10.0], [20.0, 0.0]])
        S_vec, k_vec = radial_power_spectrum(S, Kmag)

        np.testing.assert_array_equal(k_vec, [0.0, 1.0, 2.0, 3.0])
        np.testing.assert_array_equal(S_vec, [0.0, 10.0, 20.0, 30.0])

    def test_exact_equality_grouping(self):
        """Magnitudes one ulp apart are different radii by default."""
        a = 1.0
        b = np.nextafter(1.0, 2.0)
        Kmag = np.array([[a, b], [a, 0.0]])
        S = np.array([[1.0, 5.0], [3.0, 0.0]])

        S_vec, k_vec = radial_power_spectrum(S, Kmag)
        assert len(k_vec) == 3
        np.testing.assert_array_equal(S_vec, [0.0, 2.0, 5.0])

    def test_tolerance_merges_near_values(self):
        """An explicit tolerance groups round-off neighbours."""
        a = 1.0
        b = np.nextafter(1.0, 2.0)
        Kmag = np.array([[a, b], [a, 0.0]])
        S = np.array([[1.0, 5.0], [3.0, 0.0]])

        S_vec, k_vec = radial_power_spectrum(S, Kmag, tolerance=1e-12)
        np.testing.assert_array_equal(k_vec, [0.0, 1.0])
        np.testing.assert_allclose(S_vec, [0.0, 3.0])

    def test_tolerance_zero_matches_exact(self):
        """tolerance=0 reproduces exact grouping."""
        rng = np.random.default_rng(3)
        grid = make_grid(GridConfig(Nx=16, Ny=8))
        S = rng.random(grid.shape)

        exact = radial_power_spectrum(S, grid.Kmag)
        zero_tol = radial_power_spectrum(S, grid.Kmag, tolerance=0.0)

        np.testing.assert_array_equal(exact[0], zero_tol[0])
        np.testing.assert_array_equal(exact[1], zero_tol[1])

    def test_tolerance_groups_reported_at_smallest(self):
        """A group spans at most `tolerance` above its smallest radius."""
        Kmag = np.array([[1.0, 1.4, 1.8, 2.2]])
        S = np.array([[1.0, 2.0, 3.0, 4.0]])
        S_vec, k_vec = radial_power_spectrum(S, Kmag, tolerance=0.5)

        np.testing.assert_allclose(k_vec, [1.0, 1.8])
        np.testing.assert_allclose(S_vec, [1.5, 3.5])

    def test_negative_tolerance(self):
        with pytest.raises(ValidationError):
            radial_power_spectrum(np.ones((2, 2)), KMAG_4x4[:2, :2], tolerance=-1.0)

    def test_shape_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            radial_power_spectrum(np.ones((4, 3)), KMAG_4x4)


class TestSpectralNormalisations:
    """Tests for power_density and normalized_amplitude."""

    def test_power_density_single_mode(self):
        """A unit cosine puts power 1 in each of its two modes."""
        grid = make_grid(GridConfig(Lx=2 * np.pi, Ly=2 * np.pi, Nx=16, Ny=8))
        field = jnp.cos(3 * grid.X)
        S = power_density(fft2(field))

        assert float(S[0, 3]) == pytest.approx(1.0)
        assert float(S[0, -3]) == pytest.approx(1.0)
        assert float(S.sum()) == pytest.approx(2.0)

    def test_normalized_amplitude(self):
        F = jnp.full((4, 8), 3.0 + 4.0j)
        A = normalized_amplitude(F)
        np.testing.assert_allclose(A, 5.0 * 2.0 / np.sqrt(80.0))


class TestMaxAbsError:
    def test_value(self):
        a = jnp.zeros((2, 2))
        b = jnp.array([[0.0, -3.0], [1.0, 2.0]])
        assert max_abs_error(a, b) == 3.0

    def test_shape_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            max_abs_error(jnp.zeros((2, 2)), jnp.zeros((2, 3)))
