"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, FLAG_REGISTER
from chip8vm.framebuffer import draw_sprite


def sprite_rows(state: EmulatorState, height: int) -> jnp.ndarray:
    """Read ``height`` sprite bytes starting at I, wrapping at the end of memory."""
    addresses = (int(state.I) + jnp.arange(height)) % MEMORY_SIZE
    return state.memory[addresses]


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT

    display, collision = draw_sprite(
        state.display,
        sprite_rows(state, instruction.n),
        sprite_x,
        sprite_y,
        state.config.sprite_edge_mode,
    )
    return state.replace(display=display).set_register(FLAG_REGISTER, int(collision))
