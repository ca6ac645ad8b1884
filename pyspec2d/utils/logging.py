"""Logging utilities for pySpec2D verification runs.

This module provides structured logging with console and optional file
output, plus helpers for reporting operator errors and timings.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


class RunLogger:
    """Logger for pySpec2D runs with structured output."""

    def __init__(
        self,
        name: str = "pyspec2d",
        console_level: str = "INFO",
        file_path: Optional[Path] = None,
        file_level: str = "DEBUG",
    ):
        """Initialize run logger.

        Args:
            name: Logger name
            console_level: Logging level for console output
            file_path: Optional path for log file
            file_level: Logging level for file output
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)  # Capture all messages

        # Close and drop handlers left over from a previous run
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers = []

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s", datefmt="%H:%M:%S"
        )
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

        self.file_path = file_path
        if file_path:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(file_path)
            file_handler.setLevel(getattr(logging, file_level.upper()))
            file_formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

        # Metadata included in every structured message
        self.metadata: Dict[str, Any] = {}

    def set_metadata(self, **kwargs):
        """Set metadata that will be included in structured log messages."""
        self.metadata.update(kwargs)

    def _format(self, message: str, kwargs: Dict[str, Any]) -> str:
        extra_data = {**self.metadata, **kwargs}
        if extra_data:
            message = f"{message} | {json.dumps(extra_data, default=str)}"
        return message

    def info(self, message: str, **kwargs):
        """Log info message with optional structured data."""
        self.logger.info(self._format(message, kwargs))

    def debug(self, message: str, **kwargs):
        """Log debug message with optional structured data."""
        self.logger.debug(self._format(message, kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message with optional structured data."""
        self.logger.warning(self._format(message, kwargs))

    def error(self, message: str, **kwargs):
        """Log error message with optional structured data."""
        self.logger.error(self._format(message, kwargs))

    def log_run_start(self, config):
        """Log run start with configuration details."""
        grid = config.grid
        self.info("=" * 60)
        self.info("pySpec2D Verification Run")
        self.info(f"Grid: {grid.Nx}×{grid.Ny}, Lx={grid.Lx:.3f}, Ly={grid.Ly:.3f}")
        self.info(f"Centre: ({grid.x_center:.3f}, {grid.y_center:.3f})")
        self.info(f"Signal: {config.signal.type}, nonlinear: {config.nonlinear.type}")
        self.info("=" * 60)

    def log_error(self, name: str, max_error: float, shape: tuple):
        """Log the maximum error of one operator against its analytic value."""
        Ny, Nx = shape
        self.info(
            f"The maximum {name} error is {max_error:.3e} for a {Nx} by {Ny} grid"
        )

    def log_timing(self, name: str, seconds: float, shape: tuple):
        """Log the wall time of one computation."""
        Ny, Nx = shape
        self.info(f"The {name} computation time is {seconds:.3e} seconds for a {Nx} by {Ny} grid")

    def log_output(self, output_path: Path):
        """Log output save."""
        self.debug(f"Output saved: {output_path.name}")

    def log_run_complete(self, wall_time: float):
        """Log run completion."""
        self.info("=" * 60)
        self.info("Run Complete!")
        self.info(f"Wall time: {wall_time:.2f} seconds")
        self.info("=" * 60)


def setup_logging(
    output_dir: Optional[Path] = None, console_level: str = "INFO", file_level: str = "DEBUG"
) -> RunLogger:
    """Set up logging for a verification run.

    Args:
        output_dir: Directory for log files (if None, no file logging)
        console_level: Console logging level
        file_level: File logging level

    Returns:
        Configured RunLogger instance
    """
    log_file = None
    if output_dir:
        log_dir = Path(output_dir) / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"run_{timestamp}.log"

    return RunLogger(console_level=console_level, file_path=log_file, file_level=file_level)
