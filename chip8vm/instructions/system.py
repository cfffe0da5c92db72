"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.errors import StackUnderflow
from chip8vm.framebuffer import clear_display
from chip8vm.stack import pop


def instruction_address(state: EmulatorState) -> int:
    """Address of the instruction being executed (PC was advanced by fetch)."""
    return (int(state.pc) - 2) & 0xFFF


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=clear_display(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    try:
        stack, address = pop(state.stack)
    except StackUnderflow:
        raise StackUnderflow(instruction_address(state), instruction.raw) from None
    return state.replace(stack=stack, pc=jnp.astype(address, jnp.uint16))
