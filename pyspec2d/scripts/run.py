"""Run the pySpec2D operator verification from a YAML configuration file."""

import sys
import time
from pathlib import Path

import click
import jax
import numpy as np

from pyspec2d.core.dealias import dealias_product
from pyspec2d.core.grid import GridConfig, fft2, make_grid
from pyspec2d.core.operators import divergence, laplacian, x_derivative, y_derivative
from pyspec2d.core.poisson import poisson_solve
from pyspec2d.exceptions import ConfigurationError
from pyspec2d.io import load_config, save_diagnostics, save_fields, save_spectra
from pyspec2d.signals import beta_plane_source, make_signal, noisy_product_inputs
from pyspec2d.utils import (
    max_abs_error,
    normalized_amplitude,
    power_density,
    radial_power_spectrum,
    setup_logging,
)


def timed(fn, *args, **kwargs):
    """Call fn and return (result, seconds), waiting for JAX to finish."""
    t0 = time.perf_counter()
    result = jax.block_until_ready(fn(*args, **kwargs))
    return result, time.perf_counter() - t0


def check_derivatives(grid, signal, logger):
    """Compare spectral derivatives of the test signal with analytic values."""
    K, L = grid.K, grid.L
    results = {
        "dxpsi": x_derivative(signal.psi, K),
        "dypsi": y_derivative(signal.psi, L),
        "div_psi": divergence(signal.psi, K, L),
        "q": laplacian(signal.psi, K, L),
    }
    references = {
        "dxpsi": signal.dpsidx,
        "dypsi": signal.dpsidy,
        "div_psi": signal.div_psi,
        "q": signal.laplacian,
    }
    labels = {
        "dxpsi": "x derivative",
        "dypsi": "y derivative",
        "div_psi": "divergence",
        "q": "Laplacian",
    }

    errors = {}
    for name, value in results.items():
        errors[f"max_error_{name}"] = max_abs_error(value, references[name])
        logger.log_error(labels[name], errors[f"max_error_{name}"], grid.shape)

    return results, errors


def check_dealiasing(grid, config, logger, tolerance):
    """Form the aliased and de-aliased products of two noisy signals."""
    nonlinear = config.nonlinear
    key = jax.random.PRNGKey(nonlinear.seed)
    ua, ub = noisy_product_inputs(
        grid,
        nonlinear.type,
        nonlinear.noise_amplitude,
        nonlinear.sigma_fraction * grid.Lx,
        key,
    )

    u2_alias = ua * ub
    Ua, Ub = fft2(ua), fft2(ub)
    u2_dealias, seconds = timed(
        dealias_product, Ua, Ub, grid.Kmag, truncate_product=nonlinear.truncate_product
    )
    logger.log_timing("de-aliased product", seconds, grid.shape)

    # Spectra are keyed by cyclic wavenumber magnitude
    Hmag = grid.Kmag / (2.0 * np.pi)
    spectra = {
        "aliased": radial_power_spectrum(
            normalized_amplitude(fft2(u2_alias)), Hmag, tolerance=tolerance
        ),
        "dealiased": radial_power_spectrum(
            normalized_amplitude(fft2(u2_dealias)), Hmag, tolerance=tolerance
        ),
    }
    fields = {"u2_alias": u2_alias, "u2_dealias": u2_dealias}
    return fields, spectra, {"time_dealias": seconds}


def check_poisson(grid, signal, config, logger):
    """Invert the analytic Laplacian and solve the beta-plane example."""
    psiP, seconds = timed(poisson_solve, signal.laplacian, grid.Kinv, grid.Linv)
    logger.log_timing("first Poisson equation", seconds, grid.shape)
    max_error = max_abs_error(psiP, signal.psi)
    logger.log_error("Poisson equation", max_error, grid.shape)

    _, q2 = beta_plane_source(grid, config.poisson.sigma_fraction * grid.Lx, config.poisson.beta)
    psiP2, seconds2 = timed(poisson_solve, q2, grid.Kinv, grid.Linv)
    logger.log_timing("second Poisson equation", seconds2, grid.shape)

    fields = {"psi_poisson": psiP, "psi_poisson_beta": psiP2, "q_beta": q2}
    diagnostics = {
        "max_error_poisson": max_error,
        "time_poisson": seconds,
        "time_poisson_beta": seconds2,
    }
    return fields, diagnostics


def check_convergence(config, logger) -> dict:
    """Derivative and Laplacian errors over a sweep of square resolutions."""
    resolutions = config.convergence.resolutions
    dx_errors, lap_errors = [], []

    for N in resolutions:
        grid_config = GridConfig(
            Lx=config.grid.Lx,
            Ly=config.grid.Ly,
            Nx=N,
            Ny=N,
            x_center=config.grid.x_center,
            y_center=config.grid.y_center,
        )
        grid = make_grid(grid_config)
        signal = make_signal(grid, config.signal)
        dx_errors.append(max_abs_error(x_derivative(signal.psi, grid.K), signal.dpsidx))
        lap_errors.append(
            max_abs_error(laplacian(signal.psi, grid.K, grid.L), signal.laplacian)
        )
        logger.info(
            f"N={N}: x derivative error {dx_errors[-1]:.3e}, Laplacian error {lap_errors[-1]:.3e}"
        )

    return {
        "convergence_resolutions": np.asarray(resolutions, dtype=int),
        "convergence_error_dx": np.asarray(dx_errors),
        "convergence_error_laplacian": np.asarray(lap_errors),
    }


@click.command()
@click.argument("config", type=click.Path(exists=True))
@click.option("--output-dir", type=click.Path(), default="./output",
              help="Directory for output files")
@click.option("--dry-run", is_flag=True,
              help="Validate configuration without running")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              default="INFO", help="Console logging level")
def main(config, output_dir, dry_run, log_level):
    """Verify spectral derivatives, Poisson inversion and de-aliasing.

    Example:
        pyspec2d-run config.yml --output-dir=output
    """
    output_dir = Path(output_dir)
    logger = setup_logging(output_dir if not dry_run else None, console_level=log_level)

    logger.info(f"Loading configuration: {config}")
    try:
        run_config = load_config(config)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if dry_run:
        logger.info("Dry run mode - validating configuration only")
        logger.info("Configuration validated successfully!")
        logger.info(f"Grid: {run_config.grid.Nx}x{run_config.grid.Ny}, "
                    f"Lx={run_config.grid.Lx}, Ly={run_config.grid.Ly}")
        return

    output_dir.mkdir(parents=True, exist_ok=True)
    run_config.to_yaml(output_dir / "config.yml")
    logger.info(f"Configuration saved to {output_dir / 'config.yml'}")

    t_start = time.time()
    logger.log_run_start(run_config)

    grid = make_grid(run_config.grid)
    signal = make_signal(grid, run_config.signal)
    tolerance = run_config.spectrum.tolerance

    derivative_fields, diagnostics = check_derivatives(grid, signal, logger)

    spectra = {
        "signal": radial_power_spectrum(power_density(fft2(signal.psi)), grid.Kmag,
                                        tolerance=tolerance),
    }

    dealias_fields, dealias_spectra, dealias_diagnostics = check_dealiasing(
        grid, run_config, logger, tolerance
    )
    spectra.update(dealias_spectra)
    diagnostics.update(dealias_diagnostics)

    poisson_fields, poisson_diagnostics = check_poisson(grid, signal, run_config, logger)
    diagnostics.update(poisson_diagnostics)

    if run_config.convergence.resolutions:
        diagnostics.update(check_convergence(run_config, logger))

    if run_config.output.save_fields:
        fields = {"psi": signal.psi, **derivative_fields, **dealias_fields, **poisson_fields}
        fields_file = output_dir / "fields.nc"
        metadata = {
            "signal": run_config.signal.type,
            "nonlinear": run_config.nonlinear.type,
            "truncate_product": run_config.nonlinear.truncate_product,
        }
        save_fields(fields, grid, metadata, fields_file, compress=run_config.output.compress)
        logger.log_output(fields_file)

    if run_config.output.save_spectra:
        spectra_file = output_dir / "spectra.h5"
        save_spectra(spectra, spectra_file,
                     compression="gzip" if run_config.output.compress else None)
        logger.log_output(spectra_file)

    diagnostics_file = output_dir / "diagnostics.h5"
    save_diagnostics(diagnostics, diagnostics_file, config=run_config.to_dict())
    logger.log_output(diagnostics_file)

    logger.log_run_complete(time.time() - t_start)
    logger.info(f"Output saved to: {output_dir}")


if __name__ == "__main__":
    main()
