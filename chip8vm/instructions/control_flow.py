"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chip8vm.config import JumpMode, StackOverflowPolicy
from chip8vm.constants import ADDRESS_MASK
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.errors import StackOverflow
from chip8vm.instructions.system import instruction_address
from chip8vm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    try:
        stack = push(state.stack, state.pc)
    except StackOverflow as exc:
        if state.config.stack_overflow_policy is StackOverflowPolicy.RAISE:
            raise StackOverflow(exc.depth, instruction_address(state), instruction.raw) from None
        return execute_jump(state, instruction)
    return execute_jump(state.replace(stack=stack), instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return state.replace(pc=state.pc + 2)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to NNN + V0 (legacy) or XNN + VX (modern)."""
    if state.config.jump_mode is JumpMode.MODERN:
        offset = int(state.V[instruction.x])
    else:
        offset = int(state.V[0])
    jump_address = (instruction.nnn + offset) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def _key_pressed(state: EmulatorState, instruction: DecodedInstruction) -> bool:
    key_index = int(state.V[instruction.x]) & 0xF
    return bool(state.keypad[key_index])


execute_skip_if_key = make_skip_instruction(_key_pressed)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: not _key_pressed(state, inst)
)
