"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from protein_lollipop.config import apply_overrides, load_config, load_config_with_overrides
from protein_lollipop.config.schema import LollipopConfig


def test_load_valid_config():
    """Test loading the shipped default configuration."""
    config = load_config("config/default.yaml")

    assert isinstance(config, LollipopConfig)
    assert config.api.base_url == "https://rest.uniprot.org"
    assert config.api.organism == "human"
    assert config.api.max_retries == 1
    assert config.cache_backend == "json"
    assert config.filters.impacts == ["HIGH", "MODERATE"]
    assert config.filters.max_allele_frequency == 0.01


def test_missing_config_file_raises(tmp_path):
    """Test that a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_empty_config_uses_defaults(tmp_path):
    """Test that an empty YAML file yields all defaults."""
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    config = load_config(config_file)

    assert config == LollipopConfig()
    assert config.cache_dir == Path(".lollipop_cache")
    assert config.auto_retrieve is True


def test_partial_config_keeps_defaults(tmp_path):
    """Test that unspecified sections keep their defaults."""
    config_file = tmp_path / "partial.yaml"
    config_file.write_text("""
cache_dir: /tmp/lollipop
api:
  timeout_seconds: 5
""")

    config = load_config(config_file)

    assert config.cache_dir == Path("/tmp/lollipop")
    assert config.api.timeout_seconds == 5
    assert config.api.organism == "human"
    assert config.plot.dpi == 300


def test_invalid_cache_backend(tmp_path):
    """Test that an unknown cache backend is rejected."""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("cache_backend: redis\n")

    with pytest.raises(ValidationError) as exc_info:
        load_config(config_file)

    assert "cache_backend" in str(exc_info.value)


def test_invalid_max_retries(tmp_path):
    """Test that max_retries below 1 is rejected."""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("api:\n  max_retries: 0\n")

    with pytest.raises(ValidationError):
        load_config(config_file)


def test_invalid_allele_frequency(tmp_path):
    """Test that max_allele_frequency above 1 is rejected."""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("filters:\n  max_allele_frequency: 2.5\n")

    with pytest.raises(ValidationError):
        load_config(config_file)


def test_impacts_are_upper_cased(tmp_path):
    """Test that filter impacts are normalised to upper case."""
    config_file = tmp_path / "impacts.yaml"
    config_file.write_text("filters:\n  impacts: [high, Moderate]\n")

    config = load_config(config_file)

    assert config.filters.impacts == ["HIGH", "MODERATE"]


def test_config_with_overrides():
    """Test flat and dotted overrides."""
    config = load_config_with_overrides(
        "config/default.yaml",
        {
            "auto_retrieve": False,
            "api.timeout_seconds": 3,
            "plot.dpi": 150,
        },
    )

    assert config.auto_retrieve is False
    assert config.api.timeout_seconds == 3
    assert config.plot.dpi == 150


def test_invalid_override():
    """Test that overrides are validated."""
    with pytest.raises(ValidationError):
        load_config_with_overrides("config/default.yaml", {"api.max_retries": 99})


def test_config_hash_deterministic():
    """Test that identical configs hash identically."""
    config1 = load_config("config/default.yaml")
    config2 = load_config("config/default.yaml")

    assert config1.config_hash() == config2.config_hash()
    assert len(config1.config_hash()) == 64


def test_config_hash_changes():
    """Test that changing a value changes the hash."""
    config1 = load_config("config/default.yaml")
    config2 = load_config_with_overrides(
        "config/default.yaml", {"api.organism": "mouse"}
    )

    assert config1.config_hash() != config2.config_hash()


def test_apply_overrides_skips_unset_values():
    """Test that None overrides leave the loaded value in place."""
    config = load_config("config/default.yaml")

    updated = apply_overrides(config, {"cache_dir": None, "filters.max_allele_frequency": 0.5})

    assert updated.cache_dir == config.cache_dir
    assert updated.filters.max_allele_frequency == 0.5
    assert config.filters.max_allele_frequency == 0.01


def test_apply_overrides_revalidates():
    """Test that overridden values go through field validation."""
    config = load_config("config/default.yaml")

    updated = apply_overrides(config, {"cache_dir": "other", "filters.impacts": ["high"]})

    assert updated.cache_dir == Path("other")
    assert updated.filters.impacts == ["HIGH"]
    with pytest.raises(ValidationError):
        apply_overrides(config, {"plot.dpi": 10})
