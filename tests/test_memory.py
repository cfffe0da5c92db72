"""Tests for memory and register operations."""

import pytest
from chip8vm import execute
from conftest import with_registers


class TestBasicMemory:
    """Test basic memory operations."""

    def test_set_basic(self, fresh_state):
        """6XNN - Set VX = NN."""
        state = execute(fresh_state, 0x600A)
        assert state.V[0] == 0xA

    def test_add_basic(self, fresh_state):
        """7XNN - Add NN to VX."""
        state = with_registers(fresh_state, V1=0x10)
        state = execute(state, 0x7105)
        assert state.V[1] == 0x15


class TestIndexRegister:
    """Test I register operations."""

    def test_set_index_basic(self, fresh_state):
        """ANNN - Set I register to NNN."""
        state = execute(fresh_state, 0xA123)
        assert state.I == 0x123

    def test_set_index_maximum(self, fresh_state):
        """ANNN - Set I register to maximum 12-bit value."""
        state = execute(fresh_state, 0xAFFF)
        assert state.I == 0xFFF

    @pytest.mark.parametrize("value", [0x000, 0x200, 0x300, 0xA00, 0xEA0])
    def test_set_index_common_values(self, fresh_state, value):
        state = execute(fresh_state, 0xA000 | value)
        assert state.I == value


class TestRandom:
    """Test random number generation."""

    def test_random_zero_mask(self, fresh_state):
        """CXNN - Random AND with 0x00 should always be 0."""
        state = execute(with_registers(fresh_state, V0=0x55), 0xC000)
        assert state.V[0] == 0

    def test_random_bit_mask(self, fresh_state):
        """CXNN - Random AND with specific mask."""
        state = fresh_state
        for _ in range(8):
            state = execute(state, 0xC20F)
            assert 0 <= int(state.V[2]) <= 15

    def test_random_mask_patterns(self, fresh_state):
        """CXNN - Result never has bits outside the mask."""
        state = fresh_state
        for mask in (0x01, 0x03, 0x80, 0xA5):
            state = execute(state, 0xC600 | mask)
            assert int(state.V[6]) & ~mask == 0

    def test_random_advances_rng(self, fresh_state):
        state = execute(fresh_state, 0xC0FF)
        assert not (state.rng == fresh_state.rng).all()

    def test_random_preserves_state(self, fresh_state):
        """CXNN - Verify other state is preserved."""
        state = execute(fresh_state, 0x6142)
        state = execute(state, 0xA300)

        new_state = execute(state, 0xC0FF)

        assert new_state.V[1] == 0x42
        assert new_state.I == 0x300
        assert new_state.pc == state.pc
