"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.config import MemoryMode
from chip8vm.state import EmulatorState, RunState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, GLYPH_SIZE, MEMORY_SIZE, FLAG_REGISTER, ADDRESS_MASK


def _index_addresses(state: EmulatorState, count: int) -> jnp.ndarray:
    return (int(state.I) + jnp.arange(count)) % MEMORY_SIZE


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.set_register(instruction.x, state.delay_timer)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register."""
    new_i = int(state.I) + int(state.V[instruction.x])
    state = state.replace(I=jnp.astype(new_i & ADDRESS_MASK, jnp.uint16))
    if state.config.index_overflow_flag:
        state = state.set_register(FLAG_REGISTER, int(new_i > ADDRESS_MASK))
    return state


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Only records the wait; the interpreter resolves it from its input source
    on later steps (see ``emulator.resolve_key_wait``).
    """
    return state.replace(run_state=RunState.AWAITING_KEY, wait_register=instruction.x)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + (int(state.V[instruction.x]) & 0xF) * GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[_index_addresses(state, 3)].set(digits)
    return state.replace(memory=new_memory)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    if state.config.memory_mode is MemoryMode.LEGACY:
        return state.replace(I=jnp.astype((int(state.I) + instruction.x + 1) & 0xFFFF, jnp.uint16))
    return state


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    new_memory = state.memory.at[_index_addresses(state, count)].set(state.V[:count])
    return _advance_index(state.replace(memory=new_memory), instruction)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    new_V = state.V.at[:count].set(state.memory[_index_addresses(state, count)])
    return _advance_index(state.replace(V=new_V), instruction)
