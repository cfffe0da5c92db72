"""Tests for configuration loading."""

import pytest
from chip8vm import load_config, EmulatorConfig, ShiftMode, SpriteEdgeMode, ConfigError
from chip8vm.config import DEFAULT_CONFIG, StackOverflowPolicy


def test_defaults():
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config.shift_mode is ShiftMode.MODERN
    assert config.sprite_edge_mode is SpriteEdgeMode.WRAP
    assert config.stack_depth == 16
    assert config.timer_hz == 60.0


def test_dotlist_overrides():
    config = load_config(overrides=["shift_mode=LEGACY", "stack_depth=12", "logic_resets_vf=true"])

    assert isinstance(config, EmulatorConfig)
    assert config.shift_mode is ShiftMode.LEGACY
    assert config.stack_depth == 12
    assert config.logic_resets_vf is True


def test_yaml_file_then_overrides(tmp_path):
    path = tmp_path / "chip8.yaml"
    path.write_text("sprite_edge_mode: CLIP\ntimer_hz: 30\nstack_overflow_policy: IGNORE\n")

    config = load_config(str(path), ["timer_hz=120"])

    assert config.sprite_edge_mode is SpriteEdgeMode.CLIP
    assert config.stack_overflow_policy is StackOverflowPolicy.IGNORE
    assert config.timer_hz == 120.0


def test_config_is_hashable():
    assert hash(load_config(overrides=["scale=4"])) == hash(EmulatorConfig(scale=4))


@pytest.mark.parametrize("override", [
    "no_such_option=1",
    "shift_mode=SIDEWAYS",
    "stack_depth=deep",
    "stack_depth=0",
    "instructions_per_frame=0",
])
def test_rejects_bad_values(override):
    with pytest.raises(ConfigError):
        load_config(overrides=[override])


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "absent.yaml"))
