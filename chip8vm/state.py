"""CHIP-8 emulator state structures."""

from enum import Enum
from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.config import EmulatorConfig, DEFAULT_CONFIG
from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS,
)


class RunState(Enum):
    """Whether the interpreter fetches instructions or waits for FX0A."""
    RUNNING = "running"
    AWAITING_KEY = "awaiting_key"


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0

    @property
    def depth(self) -> int:
        return int(self.pointer)

    @property
    def capacity(self) -> int:
        return self.data.shape[0]


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is indexed ``[x, y]``. ``run_state`` and ``wait_register``
    track a pending FX0A key wait; ``config`` selects behaviour variants.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    run_state: RunState = field(pytree_node=False, default=RunState.RUNNING)
    wait_register: Optional[int] = field(pytree_node=False, default=None)
    config: EmulatorConfig = field(pytree_node=False, default=DEFAULT_CONFIG)

    def set_register(self, index: int, value) -> "EmulatorState":
        """Return a copy with V[index] = value (mod 256)."""
        return self.replace(V=self.V.at[index].set(int(value) & 0xFF))

    @property
    def sound_on(self) -> bool:
        return int(self.sound_timer) > 0


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    config: EmulatorConfig = DEFAULT_CONFIG,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(
        rng,
        stack=StackState(data=jnp.zeros(config.stack_depth, dtype=jnp.uint16)),
        config=config,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
