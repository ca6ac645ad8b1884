"""I/O module for pySpec2D.

This module provides run configuration management and HDF5 output
for verification runs.
"""

from .config import (
    ConvergenceConfig,
    GridConfig,
    NonlinearConfig,
    OutputConfig,
    PoissonConfig,
    RunConfig,
    SignalConfig,
    SpectrumConfig,
    load_config,
)
from .hdf5_io import (
    load_diagnostics,
    load_fields,
    load_spectra,
    save_diagnostics,
    save_fields,
    save_spectra,
)

__all__ = [
    # Configuration
    "RunConfig",
    "GridConfig",
    "SignalConfig",
    "NonlinearConfig",
    "PoissonConfig",
    "SpectrumConfig",
    "ConvergenceConfig",
    "OutputConfig",
    "load_config",
    # HDF5 I/O
    "save_fields",
    "load_fields",
    "save_spectra",
    "load_spectra",
    "save_diagnostics",
    "load_diagnostics",
]
