"""Configuration system for pySpec2D verification runs.

This module provides dataclasses describing the domain, the test signals
and the outputs of a run. Configuration files are written in YAML and
converted to these dataclasses, which validate themselves on construction.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import yaml

from ..core.grid import GridConfig
from ..exceptions import ConfigurationError
from ..validation import validate_grid_size


@dataclass
class SignalConfig:
    """Test signal for the derivative and inversion checks.

    Attributes:
        type: 'sine' or 'gaussian'
        modes_x: Number of sine periods across the domain in x
        modes_y: Number of sine periods across the domain in y
        sigma_fraction: Gaussian width as a fraction of Lx
    """
    type: str = "sine"
    modes_x: int = 1
    modes_y: int = 1
    sigma_fraction: float = 1.0 / 20.0

    def __post_init__(self):
        if self.type not in ["sine", "gaussian"]:
            raise ConfigurationError(f"Unknown signal type: {self.type}")
        if self.modes_x < 1 or self.modes_y < 1:
            raise ConfigurationError(
                f"modes must be positive integers, got ({self.modes_x}, {self.modes_y})"
            )
        if self.sigma_fraction <= 0:
            raise ConfigurationError(f"sigma_fraction must be positive, got {self.sigma_fraction}")


@dataclass
class NonlinearConfig:
    """Quadratic signal for the de-aliasing check.

    Attributes:
        type: 'sine_noise' or 'gaussian_noise'
        noise_amplitude: Upper bound of the uniform noise
        sigma_fraction: Gaussian width as a fraction of Lx
        seed: Random seed for the noise
        truncate_product: Strip the truncated band from the product as well
    """
    type: str = "sine_noise"
    noise_amplitude: float = 0.5
    sigma_fraction: float = 1.0 / 10.0
    seed: int = 0
    truncate_product: bool = False

    def __post_init__(self):
        if self.type not in ["sine_noise", "gaussian_noise"]:
            raise ConfigurationError(f"Unknown nonlinear signal type: {self.type}")
        if self.noise_amplitude < 0:
            raise ConfigurationError(
                f"noise_amplitude must be non-negative, got {self.noise_amplitude}"
            )
        if self.sigma_fraction <= 0:
            raise ConfigurationError(f"sigma_fraction must be positive, got {self.sigma_fraction}")


@dataclass
class PoissonConfig:
    """Beta-plane Poisson example.

    Attributes:
        beta: Slope of the linear background in the source term
        sigma_fraction: Gaussian width as a fraction of Lx
    """
    beta: float = 1.0e-9
    sigma_fraction: float = 1.0 / 20.0

    def __post_init__(self):
        if self.sigma_fraction <= 0:
            raise ConfigurationError(f"sigma_fraction must be positive, got {self.sigma_fraction}")


@dataclass
class SpectrumConfig:
    """Radial spectrum reduction.

    Attributes:
        tolerance: Magnitude grouping tolerance (None for exact equality)
    """
    tolerance: Optional[float] = None

    def __post_init__(self):
        if self.tolerance is not None and self.tolerance < 0:
            raise ConfigurationError(f"tolerance must be non-negative, got {self.tolerance}")


@dataclass
class ConvergenceConfig:
    """Resolution sweep.

    Attributes:
        resolutions: Square grid sizes to evaluate (each even)
    """
    resolutions: List[int] = field(default_factory=list)

    def __post_init__(self):
        for N in self.resolutions:
            validate_grid_size(N, "resolution")


@dataclass
class OutputConfig:
    """Configuration for run output.

    Attributes:
        save_fields: Write computed and analytic fields to fields.nc
        save_spectra: Write radial spectra to spectra.h5
        compress: Whether to use compression
    """
    save_fields: bool = True
    save_spectra: bool = True
    compress: bool = True


@dataclass
class RunConfig:
    """Main configuration for a pySpec2D verification run."""
    grid: GridConfig = field(default_factory=GridConfig)
    signal: SignalConfig = field(default_factory=SignalConfig)
    nonlinear: NonlinearConfig = field(default_factory=NonlinearConfig)
    poisson: PoissonConfig = field(default_factory=PoissonConfig)
    spectrum: SpectrumConfig = field(default_factory=SpectrumConfig)
    convergence: ConvergenceConfig = field(default_factory=ConvergenceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "RunConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            RunConfig instance
        """
        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not parse {path}: {e}") from e
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "RunConfig":
        """Create configuration from dictionary.

        Args:
            data: Dictionary with configuration data

        Returns:
            RunConfig instance
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping of sections, got {type(data).__name__}"
            )

        sections = {
            "grid": GridConfig,
            "signal": SignalConfig,
            "nonlinear": NonlinearConfig,
            "poisson": PoissonConfig,
            "spectrum": SpectrumConfig,
            "convergence": ConvergenceConfig,
            "output": OutputConfig,
        }

        unknown = set(data) - set(sections)
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections: {sorted(unknown)}")

        kwargs = {}
        for name, section_cls in sections.items():
            try:
                kwargs[name] = section_cls(**(data.get(name) or {}))
            except TypeError as e:
                raise ConfigurationError(f"Invalid '{name}' section: {e}") from e

        return cls(**kwargs)

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save YAML file
        """
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return asdict(self)


def load_config(path: Union[str, Path]) -> RunConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        RunConfig instance
    """
    return RunConfig.from_yaml(path)
