"""
Tests for Simulation Settings
"""

import pytest

from matchsim.errors import SettingsError
from matchsim.models import SimulationMode
from matchsim.settings import SimulationSettings, load_settings


class TestSimulationSettings:
    """Tests for the settings model."""

    def test_defaults(self, settings):
        """Test stock values."""
        assert settings.default_mode == SimulationMode.ADVANCED
        assert settings.rating.advanced.performance_weight == 0.6
        assert settings.rating.simple.noise == 8.0
        assert settings.finishes.advanced["pinfall"] == 60.0
        assert settings.injuries.type_risk["tlc"] == 25.0
        assert settings.referees.weekly_match_cap == 5

    def test_rating_weights_by_mode(self, settings):
        """Test the mode selects the matching weight set."""
        assert settings.rating_weights(SimulationMode.SIMPLE) is settings.rating.simple
        assert settings.rating_weights(SimulationMode.ADVANCED) is settings.rating.advanced

    def test_bounds_are_enforced(self):
        """Test out-of-range values are rejected."""
        with pytest.raises(ValueError):
            SimulationSettings(auto_simple_threshold=0)


class TestLoadSettings:
    """Tests for loading settings from YAML."""

    def test_partial_override_keeps_defaults(self, tmp_path):
        """Test a partial file overlays only the keys it names."""
        path = tmp_path / "sim.yaml"
        path.write_text(
            "default_mode: simple\n"
            "rating:\n"
            "  simple:\n"
            "    noise: 3\n"
            "injuries:\n"
            "  type_risk:\n"
            "    tlc: 40\n"
        )

        settings = load_settings(path)

        assert settings.default_mode == SimulationMode.SIMPLE
        assert settings.rating.simple.noise == 3
        # Untouched siblings keep their simple-mode defaults
        assert settings.rating.simple.performance_weight == 0.7
        assert settings.injuries.type_risk["tlc"] == 40
        assert settings.injuries.type_risk["ladder"] == 20

    def test_empty_file_gives_defaults(self, tmp_path):
        """Test an empty file is the same as no overrides."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == SimulationSettings()

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_values(self, tmp_path):
        """Test validation failures surface as SettingsError."""
        path = tmp_path / "bad.yaml"
        path.write_text("phases:\n  near_fall_chance: 3.0\n")
        with pytest.raises(SettingsError):
            load_settings(path)

    def test_non_mapping(self, tmp_path):
        """Test a non-mapping document is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(SettingsError):
            load_settings(path)

    def test_shipped_config_loads(self):
        """Test the repository's default config file is valid."""
        from pathlib import Path

        path = Path(__file__).resolve().parents[2] / "config" / "simulation.yaml"
        settings = load_settings(path)
        assert settings.finishes.simple["pinfall"] == 65
