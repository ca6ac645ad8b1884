"""HDF5 I/O functionality for pySpec2D.

Fields are written as NetCDF (HDF5) through xarray so that coordinates
travel with the data; radial spectra and scalar diagnostics are written
directly with h5py.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Union

import h5py
import jax.numpy as jnp
import numpy as np
import xarray as xr

from .. import __version__
from ..core.grid import Grid
from ..exceptions import ShapeMismatchError


def save_fields(
    data: dict[str, jnp.ndarray],
    grid: Grid,
    metadata: dict[str, Any],
    filename: Union[str, Path],
    compress: bool = True,
) -> None:
    """Save physical-space fields to a NetCDF file using xarray.

    Args:
        data: Dictionary of real fields, each of shape (Ny, Nx)
        grid: Grid object with coordinate information
        metadata: Additional metadata to save as attributes
        filename: Path to save output file
        compress: Whether to use compression
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    coords = {"x": np.array(grid.x), "y": np.array(grid.y)}
    data_vars = {}

    for name, field in data.items():
        field_np = np.array(field)
        if field_np.shape != grid.shape:
            raise ShapeMismatchError(
                f"{name} has shape {field_np.shape}, expected {grid.shape}"
            )
        data_vars[name] = xr.DataArray(
            field_np,
            dims=["y", "x"],
            coords=coords,
            attrs={"long_name": name},
        )

    ds = xr.Dataset(data_vars)

    # Convert booleans and None to strings for NetCDF compatibility
    for key, value in metadata.items():
        if isinstance(value, bool) or value is None:
            ds.attrs[key] = str(value)
        else:
            ds.attrs[key] = value
    ds.attrs["created"] = datetime.now().isoformat()
    ds.attrs["pyspec2d_version"] = __version__

    ds.attrs["Nx"] = grid.Nx
    ds.attrs["Ny"] = grid.Ny
    ds.attrs["Lx"] = float(grid.Lx)
    ds.attrs["Ly"] = float(grid.Ly)

    encoding = {}
    if compress:
        comp = {"zlib": True, "complevel": 4}
        for var in ds.data_vars:
            encoding[var] = comp

    ds.to_netcdf(filename, encoding=encoding, engine="h5netcdf")


def load_fields(filename: Union[str, Path]) -> xr.Dataset:
    """Load fields saved by save_fields.

    Args:
        filename: Path to output file

    Returns:
        xarray Dataset with the fields loaded into memory
    """
    with xr.open_dataset(filename, engine="h5netcdf") as ds:
        return ds.load()


def save_spectra(
    spectra: dict[str, tuple],
    filename: Union[str, Path],
    compression: str = "gzip",
) -> None:
    """Save radial spectra to HDF5.

    Args:
        spectra: Mapping name -> (S_vec, k_vec) as returned by
            radial_power_spectrum
        filename: Path to spectra file
        compression: HDF5 compression type ('gzip', 'lzf', or None)
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    with h5py.File(filename, "w") as f:
        f.attrs["created"] = datetime.now().isoformat()
        for name, (S_vec, k_vec) in spectra.items():
            group = f.create_group(name)
            group.create_dataset("power", data=np.asarray(S_vec), compression=compression)
            group.create_dataset("k", data=np.asarray(k_vec), compression=compression)


def load_spectra(filename: Union[str, Path]) -> dict[str, tuple[np.ndarray, np.ndarray]]:
    """Load radial spectra saved by save_spectra.

    Returns:
        Mapping name -> (S_vec, k_vec)
    """
    spectra = {}
    with h5py.File(filename, "r") as f:
        for name, group in f.items():
            spectra[name] = (group["power"][:], group["k"][:])
    return spectra


def save_diagnostics(
    diagnostics: dict[str, Union[np.ndarray, float]],
    filename: Union[str, Path],
    config: dict[str, Any] = None,
) -> None:
    """Save scalar and array diagnostics to HDF5.

    Args:
        diagnostics: Dictionary of diagnostic quantities (errors, timings,
            convergence tables)
        filename: Path to diagnostics file
        config: Optional configuration dictionary stored as JSON
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    with h5py.File(filename, "w") as f:
        f.attrs["created"] = datetime.now().isoformat()
        f.attrs["pyspec2d_version"] = __version__
        if config is not None:
            f.attrs["config"] = json.dumps(config, default=str)

        for name, value in diagnostics.items():
            f.create_dataset(name, data=np.asarray(value))


def load_diagnostics(filename: Union[str, Path]) -> dict[str, np.ndarray]:
    """Load diagnostic data from HDF5 file.

    Args:
        filename: Path to diagnostics file

    Returns:
        Dictionary with diagnostic arrays (scalars as 0-d arrays)
    """
    diagnostics = {}

    with h5py.File(filename, "r") as f:
        for key in f:
            diagnostics[key] = f[key][()]

    return diagnostics
