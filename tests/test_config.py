"""Tests for render configuration."""

import math
from pathlib import Path

import pytest

from voxgen.errors import ConfigError, VoxgenError
from voxgen.grammar import PRESETS
from voxgen.utils.config import RenderConfig


def test_defaults():
    """Defaults match a 64-voxel canvas with quarter turns."""
    config = RenderConfig()
    assert config.derivation_length == 2
    assert config.step_size == 2.0
    assert config.angle_increment == pytest.approx(math.pi / 2)
    assert config.size == (64, 64, 64)
    assert config.offset_x == 0.0 and config.offset_y == 0.0
    assert config.rainbow is False
    assert config.output_dir == Path("volumes")


@pytest.mark.parametrize("kwargs", [
    {"derivation_length": -1},
    {"derivation_length": 1.5},
    {"derivation_length": True},
    {"size_x": 0},
    {"size_y": -4},
    {"size_z": 2.0},
    {"step_size": float("nan")},
    {"angle_increment": float("inf")},
    {"offset_x": float("-inf")},
])
def test_validation(kwargs):
    with pytest.raises(ValueError):
        RenderConfig(**kwargs)


def test_output_dir_coerced():
    config = RenderConfig(output_dir="some/dir")
    assert config.output_dir == Path("some/dir")


def test_with_overrides():
    config = RenderConfig()
    updated = config.with_overrides({"derivation_length": 5, "rainbow": True})

    assert updated.derivation_length == 5
    assert updated.rainbow is True
    assert config.derivation_length == 2


def test_with_overrides_unknown_field():
    with pytest.raises(ValueError, match="colour"):
        RenderConfig().with_overrides({"colour": "red"})


def test_with_overrides_validates():
    with pytest.raises(ValueError):
        RenderConfig().with_overrides({"size_x": -1})


@pytest.mark.parametrize("name", sorted(PRESETS))
def test_preset_options_are_valid(name):
    """Every preset's options are known config fields with valid values."""
    config = RenderConfig().with_overrides(PRESETS[name].options)
    assert config.derivation_length >= 0


def test_output_paths(tmp_path):
    config = RenderConfig(derivation_length=8, output_dir=tmp_path / "out")
    vox_path = config.get_output_path("dragon")

    assert vox_path == tmp_path / "out" / "dragon_8.vox"
    assert vox_path.parent.is_dir()
    assert config.get_metadata_path("dragon") == tmp_path / "out" / "dragon_8.json"


def test_to_dict():
    data = RenderConfig(output_dir=Path("a/b")).to_dict()
    assert data["output_dir"] == str(Path("a/b"))
    assert data["size_x"] == 64
    assert set(data) >= {"derivation_length", "step_size", "angle_increment", "rainbow"}


def test_errors_are_config_errors():
    """Invalid settings raise a ValueError that is also a voxgen error."""
    with pytest.raises(ConfigError) as excinfo:
        RenderConfig(size_x=0)
    assert isinstance(excinfo.value, ValueError)
    assert isinstance(excinfo.value, VoxgenError)

    with pytest.raises(ConfigError):
        RenderConfig().with_overrides({"colour": "red"})
