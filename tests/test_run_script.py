"""Tests for the run.py CLI script."""

import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest
import yaml
from click.testing import CliRunner

from pyspec2d.io import load_config, load_diagnostics, load_fields, load_spectra
from pyspec2d.scripts import run


class TestRunScriptCLI:
    """Test command-line interface of run.py."""

    @pytest.fixture
    def temp_dir(self):
        """Create temporary directory for test outputs."""
        temp_dir = tempfile.mkdtemp()
        yield Path(temp_dir)
        shutil.rmtree(temp_dir)

    def write_config(self, temp_dir, config, name="config.yml"):
        config_path = temp_dir / name
        with open(config_path, "w") as f:
            yaml.dump(config, f)
        return config_path

    @pytest.fixture
    def minimal_config(self, temp_dir):
        """Small grid with a short convergence sweep."""
        config = {
            "grid": {"Lx": 3000.0, "Ly": 3000.0, "Nx": 32, "Ny": 32},
            "signal": {"type": "sine"},
            "nonlinear": {"type": "sine_noise", "seed": 3},
            "convergence": {"resolutions": [16, 32]},
        }
        return self.write_config(temp_dir, config)

    def test_cli_basic(self, minimal_config, temp_dir):
        """Test basic CLI invocation."""
        runner = CliRunner()
        output_dir = temp_dir / "basic_output"
        result = runner.invoke(run.main, [str(minimal_config), "--output-dir", str(output_dir)])

        assert result.exit_code == 0, result.output
        assert "Run Complete!" in result.output

        for name in ["config.yml", "fields.nc", "spectra.h5", "diagnostics.h5"]:
            assert (output_dir / name).exists()
        assert any((output_dir / "logs").glob("run_*.log"))

        # Saved config reloads to the same run
        assert load_config(output_dir / "config.yml") == load_config(minimal_config)

    def test_run_outputs(self, minimal_config, temp_dir):
        """Errors, spectra and fields written by a run."""
        output_dir = temp_dir / "output"
        runner = CliRunner()
        result = runner.invoke(
            run.main, [str(minimal_config), "--output-dir", str(output_dir), "--log-level", "DEBUG"]
        )
        assert result.exit_code == 0, result.output

        diagnostics = load_diagnostics(output_dir / "diagnostics.h5")
        for key in ["max_error_dxpsi", "max_error_dypsi", "max_error_div_psi", "max_error_q"]:
            assert float(diagnostics[key]) < 1e-12
        assert float(diagnostics["max_error_poisson"]) < 1e-10
        assert float(diagnostics["time_dealias"]) >= 0.0
        np.testing.assert_array_equal(diagnostics["convergence_resolutions"], [16, 32])
        assert diagnostics["convergence_error_laplacian"].shape == (2,)

        spectra = load_spectra(output_dir / "spectra.h5")
        assert set(spectra) == {"signal", "aliased", "dealiased"}
        S_vec, k_vec = spectra["signal"]
        assert len(S_vec) == len(k_vec)
        assert np.all(np.diff(k_vec) > 0)

        ds = load_fields(output_dir / "fields.nc")
        for name in ["psi", "dxpsi", "q", "u2_alias", "u2_dealias", "psi_poisson"]:
            assert ds[name].shape == (32, 32)

    def test_truncated_product_spectrum(self, temp_dir):
        """With truncate_product the de-aliased spectrum vanishes above the cutoff."""
        config_path = self.write_config(temp_dir, {
            "grid": {"Lx": 3000.0, "Ly": 3000.0, "Nx": 48, "Ny": 48},
            "nonlinear": {"type": "gaussian_noise", "truncate_product": True},
            "output": {"save_fields": False},
        })
        output_dir = temp_dir / "truncated"

        result = CliRunner().invoke(run.main, [str(config_path), "--output-dir", str(output_dir)])
        assert result.exit_code == 0, result.output
        assert not (output_dir / "fields.nc").exists()

        # Cyclic wavenumber of the cutoff: (N/3) / L
        cutoff = 48 / 3 / 3000.0
        S_vec, k_vec = load_spectra(output_dir / "spectra.h5")["dealiased"]
        assert np.max(S_vec[k_vec > cutoff * (1 + 1e-9)]) < 1e-10 * np.max(S_vec)

        S_alias, k_alias = load_spectra(output_dir / "spectra.h5")["aliased"]
        assert np.max(S_alias[k_alias > cutoff * (1 + 1e-9)]) > 1e-6 * np.max(S_alias)

    def test_dry_run(self, minimal_config, temp_dir):
        """Dry run validates without writing output."""
        output_dir = temp_dir / "dry"
        result = CliRunner().invoke(
            run.main, [str(minimal_config), "--output-dir", str(output_dir), "--dry-run"]
        )

        assert result.exit_code == 0
        assert "Configuration validated successfully!" in result.output
        assert not output_dir.exists()

    def test_invalid_config(self, temp_dir):
        """Invalid configuration exits with an error."""
        config_path = self.write_config(temp_dir, {"grid": {"Nx": 33}}, "bad.yml")
        result = CliRunner().invoke(run.main, [str(config_path), "--dry-run"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_unknown_section(self, temp_dir):
        config_path = self.write_config(temp_dir, {"solver": {"alpha": 1.0}}, "bad.yml")
        result = CliRunner().invoke(run.main, [str(config_path), "--dry-run"])
        assert result.exit_code == 1

    def test_non_mapping_config(self, temp_dir):
        """A YAML list at top level is reported, not raised."""
        config_path = temp_dir / "list.yml"
        config_path.write_text("- grid\n- signal\n")
        result = CliRunner().invoke(run.main, [str(config_path), "--dry-run"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_missing_file(self, temp_dir):
        result = CliRunner().invoke(run.main, [str(temp_dir / "missing.yml")])
        assert result.exit_code != 0
