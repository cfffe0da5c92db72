"""Main CHIP-8 emulator execution engine.

Pure functions over ``EmulatorState``: ``fetch`` and ``execute`` make up one
cycle, ``tick`` advances the timers, ``resolve_key_wait`` completes a pending
FX0A. Side effects on the host (drawing, sound) live in ``interpreter``.
"""

from typing import Callable, Optional, Union
import os

import jax.numpy as jnp
from chip8vm.config import UnknownOpcodePolicy
from chip8vm.state import EmulatorState, RunState
from chip8vm.decode import DecodedInstruction, Operation, decode
from chip8vm.constants import PROGRAM_START, MAX_ROM_SIZE, MEMORY_SIZE
from chip8vm.errors import OversizedRom, UnknownOpcode, UnreadableRom
from chip8vm.logging import get_logger
from chip8vm.instructions.system import execute_clear_screen, execute_return, instruction_address, no_op
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
)

logger = get_logger("chip8vm.emulator")

Handler = Callable[[EmulatorState, DecodedInstruction], EmulatorState]

HANDLERS: dict[Operation, Handler] = {
    Operation.CLEAR_SCREEN: execute_clear_screen,
    Operation.RETURN: execute_return,
    Operation.JUMP: execute_jump,
    Operation.CALL: execute_call,
    Operation.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Operation.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    Operation.SKIP_EQ_REG: execute_skip_if_equal_register,
    Operation.SET_IMM: execute_set,
    Operation.ADD_IMM: execute_add,
    Operation.MOVE: execute_alu_operation,
    Operation.OR: execute_alu_operation,
    Operation.AND: execute_alu_operation,
    Operation.XOR: execute_alu_operation,
    Operation.ADD_REG: execute_alu_operation,
    Operation.SUB_XY: execute_alu_operation,
    Operation.SHIFT_RIGHT: execute_alu_operation,
    Operation.SUB_YX: execute_alu_operation,
    Operation.SHIFT_LEFT: execute_alu_operation,
    Operation.SKIP_NE_REG: execute_skip_if_not_equal_register,
    Operation.SET_INDEX: execute_set_index,
    Operation.JUMP_OFFSET: execute_jump_with_offset,
    Operation.RANDOM: execute_random,
    Operation.DRAW: execute_display,
    Operation.SKIP_KEY: execute_skip_if_key,
    Operation.SKIP_NOT_KEY: execute_skip_if_not_key,
    Operation.GET_DELAY: execute_get_delay_timer,
    Operation.WAIT_KEY: execute_wait_for_key,
    Operation.SET_DELAY: execute_set_delay_timer,
    Operation.SET_SOUND: execute_set_sound_timer,
    Operation.ADD_INDEX: execute_add_to_index,
    Operation.FONT_CHARACTER: execute_font_character,
    Operation.BCD: execute_bcd_conversion,
    Operation.STORE_REGISTERS: execute_store_registers,
    Operation.LOAD_REGISTERS: execute_load_registers,
    Operation.UNKNOWN: no_op,
}


def execute_decoded(state: EmulatorState, decoded_instruction: DecodedInstruction) -> EmulatorState:
    """Execute an already decoded instruction."""
    if not decoded_instruction.is_known:
        address = instruction_address(state)
        if state.config.unknown_opcode_policy is UnknownOpcodePolicy.RAISE:
            raise UnknownOpcode(address, decoded_instruction.raw)
        logger.warning(f"Skipping unknown opcode 0x{decoded_instruction.raw:04X} at 0x{address:03X}")
    return HANDLERS[decoded_instruction.operation](state, decoded_instruction)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    return execute_decoded(state, decode(instruction))


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory."""
    pc = int(state.pc)
    instruction = _pack_u16(state.memory[pc % MEMORY_SIZE], state.memory[(pc + 1) % MEMORY_SIZE])
    return state.replace(pc=state.pc + 2), instruction


def tick(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers by one, flooring at zero.

    Timers are frozen while the machine waits for a key.
    """
    if state.run_state is RunState.AWAITING_KEY:
        return state
    delay = max(int(state.delay_timer) - 1, 0)
    sound = max(int(state.sound_timer) - 1, 0)
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


def resolve_key_wait(state: EmulatorState, key: Optional[int]) -> EmulatorState:
    """Complete a pending FX0A with ``key``; no key leaves the wait pending."""
    if state.run_state is not RunState.AWAITING_KEY or key is None:
        return state
    state = state.set_register(state.wait_register, key & 0xF)
    return state.replace(run_state=RunState.RUNNING, wait_register=None)


def load_rom(state: EmulatorState, rom_data: Union[bytes, bytearray]) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    Raises:
        OversizedRom: ROM is longer than MAX_ROM_SIZE bytes
    """
    if len(rom_data) > MAX_ROM_SIZE:
        raise OversizedRom(len(rom_data), MAX_ROM_SIZE)
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom_file(filename: Union[str, os.PathLike]) -> bytes:
    """Read a ROM image from disk.

    Raises:
        UnreadableRom: path missing, not a file or not readable
    """
    try:
        with open(filename, 'rb') as f:
            return f.read()
    except OSError as exc:
        raise UnreadableRom(os.fspath(filename), exc.strerror or str(exc)) from exc


def load_rom_file(state: EmulatorState, filename: Union[str, os.PathLike]) -> EmulatorState:
    """Read ``filename`` and load it at 0x200."""
    rom_data = read_rom_file(filename)
    state = load_rom(state, rom_data)
    logger.info(f"Loaded {len(rom_data)} bytes from {os.fspath(filename)}")
    return state
