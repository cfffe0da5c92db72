"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, EmulatorConfig, ShiftMode, JumpMode, MemoryMode


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state with modern quirks."""
    return create_state(config=EmulatorConfig(
        shift_mode=ShiftMode.MODERN, jump_mode=JumpMode.MODERN, memory_mode=MemoryMode.MODERN,
    ))


@pytest.fixture
def legacy_state():
    """Provide a fresh state with COSMAC VIP quirks."""
    return create_state(config=EmulatorConfig(
        shift_mode=ShiftMode.LEGACY, jump_mode=JumpMode.LEGACY, memory_mode=MemoryMode.LEGACY,
    ))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def with_registers(state, **registers):
    """Helper to set registers by name, e.g. with_registers(state, V1=0x10)."""
    for name, value in registers.items():
        state = state.set_register(int(name[1:], 16), value)
    return state
