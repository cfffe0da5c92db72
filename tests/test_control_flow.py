"""Tests for control flow instructions."""

import pytest
import jax.numpy as jnp
from chip8vm import execute, create_state, EmulatorConfig, StackOverflow, StackUnderflow, StackOverflowPolicy
from conftest import with_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_only_moves_pc(self, fresh_state):
        """1NNN - Jump to 0x2F0 sets PC and nothing else."""
        state = execute(fresh_state, 0x12F0)

        assert state.pc == 0x2F0
        assert (state.V == fresh_state.V).all()
        assert state.I == fresh_state.I
        assert state.stack.depth == 0
        assert (state.memory == fresh_state.memory).all()


class TestSubroutines:
    """Test 2NNN / 00EE and the bounded stack."""

    def test_call_then_return(self, fresh_state):
        state = execute(fresh_state, 0x2400)
        assert state.pc == 0x400
        assert state.stack.depth == 1

        state = execute(state, 0x00EE)
        assert state.pc == fresh_state.pc
        assert state.stack.depth == 0

    def test_nested_calls_unwind_in_order(self, fresh_state):
        state = execute(fresh_state, 0x2300)   # from 0x200
        state = state.replace(pc=state.pc + 6)  # pretend three instructions ran
        state = execute(state, 0x2500)         # from 0x306

        state = execute(state, 0x00EE)
        assert state.pc == 0x306
        state = execute(state, 0x00EE)
        assert state.pc == 0x200

    def test_return_with_empty_stack(self, fresh_state):
        with pytest.raises(StackUnderflow) as excinfo:
            execute(fresh_state.replace(pc=fresh_state.pc + 2), 0x00EE)
        assert excinfo.value.opcode == 0x00EE
        assert excinfo.value.address == 0x200

    def test_call_on_full_stack_raises(self, fresh_state):
        state = fresh_state
        for _ in range(16):
            state = execute(state, 0x2300)
        assert state.stack.depth == 16

        state = state.replace(pc=jnp.asarray(0x302, dtype=jnp.uint16))
        with pytest.raises(StackOverflow) as excinfo:
            execute(state, 0x2300)
        assert excinfo.value.depth == 16
        assert excinfo.value.address == 0x300
        assert excinfo.value.opcode == 0x2300

    def test_call_on_full_stack_ignored(self):
        state = create_state(config=EmulatorConfig(stack_depth=2, stack_overflow_policy=StackOverflowPolicy.IGNORE))
        state = execute(state, 0x2300)
        state = execute(state, 0x2400)

        state = execute(state, 0x2500)

        assert state.pc == 0x500
        assert state.stack.depth == 2


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = with_registers(fresh_state, V5=0x42)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = with_registers(fresh_state, V5=0x41)
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = with_registers(fresh_state, V3=0x10)
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = with_registers(fresh_state, V3=0x20)
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = with_registers(fresh_state, V1=0x55, V2=0x55)
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = with_registers(fresh_state, V1=0x55, V2=0x44)
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = with_registers(fresh_state, V7=0xAA, V8=0xBB)
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = with_registers(fresh_state, V7=0xCC, V8=0xCC)
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = with_registers(fresh_state, V0=0xFF)
        initial_pc = state.pc

        state = execute(state, 0x30FF)
        assert state.pc == initial_pc + 2


class TestJumpWithOffset:
    """Test jump with offset in both modes."""

    def test_jump_with_offset_legacy(self, legacy_state):
        """BNNN - Jump with V0 offset (legacy mode)."""
        state = execute(legacy_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_modern(self, modern_state):
        """BXNN - Jump with VX offset (modern mode)."""
        state = execute(modern_state, 0x6210)  # V2 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V2
        assert state.pc == 0x260

    def test_jump_mode_comparison(self, modern_state, legacy_state):
        """Test that jump_mode changes which register is added."""
        setup = dict(V0=0x10, V2=0x30)
        state_legacy = execute(with_registers(legacy_state, **setup), 0xB250)
        state_modern = execute(with_registers(modern_state, **setup), 0xB250)

        assert state_legacy.pc == 0x260  # 0x250 + 0x10 (used V0)
        assert state_modern.pc == 0x280  # 0x250 + 0x30 (used V2)

    def test_jump_with_offset_wraps(self, legacy_state):
        state = execute(with_registers(legacy_state, V0=0xFF), 0xBFFF)
        assert state.pc == (0xFFF + 0xFF) & 0xFFF


class TestKeypad:
    """Test EX9E / EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        state = with_registers(fresh_state, V0=5)
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_other_key_pressed(self, fresh_state):
        state = with_registers(fresh_state, V0=5)
        state = state.replace(keypad=state.keypad.at[6].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        state = with_registers(fresh_state, V0=5)
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_key_held(self, fresh_state):
        state = with_registers(fresh_state, V3=0xA)
        state = state.replace(keypad=state.keypad.at[0xA].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE3A1)
        assert state.pc == initial_pc
