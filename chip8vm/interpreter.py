"""Stateful CHIP-8 interpreter bound to its host collaborators."""

from typing import Optional

import jax
import numpy as np

from chip8vm.config import EmulatorConfig, DEFAULT_CONFIG
from chip8vm.constants import NUM_KEYS
from chip8vm.decode import DecodedInstruction, Operation, decode
from chip8vm.emulator import execute_decoded, fetch, load_rom, resolve_key_wait, tick
from chip8vm.framebuffer import pack_rows
from chip8vm.interfaces import (
    AudioActuator, InputSource, Presentation, NullAudio, NullInput, NullPresentation,
)
from chip8vm.logging import get_logger
from chip8vm.state import EmulatorState, RunState, create_state

logger = get_logger("chip8vm.interpreter")


class Interpreter:
    """Owns one machine and drives it against presentation, audio and input.

    The external driver calls ``tick()`` at ``config.timer_hz`` and ``step()``
    as often as it likes. ``step()`` never blocks: while an FX0A key wait is
    pending it only polls the input source, so the driver stays free to
    handle quit events.
    """

    def __init__(
        self,
        config: EmulatorConfig = DEFAULT_CONFIG,
        presentation: Optional[Presentation] = None,
        audio: Optional[AudioActuator] = None,
        input_source: Optional[InputSource] = None,
        seed: int = 0,
    ):
        self.presentation = presentation or NullPresentation()
        self.audio = audio or NullAudio()
        self.input_source = input_source or NullInput()
        self.state: EmulatorState = create_state(jax.random.PRNGKey(seed), config)
        self.cycles = 0

    @property
    def config(self) -> EmulatorConfig:
        return self.state.config

    @property
    def awaiting_key(self) -> bool:
        return self.state.run_state is RunState.AWAITING_KEY

    def load(self, rom_data: bytes):
        """Load a program image at 0x200."""
        self.state = load_rom(self.state, rom_data)

    def framebuffer(self) -> list[int]:
        """Read-only snapshot of the display as 32 row words."""
        return pack_rows(self.state.display)

    def tick(self):
        """Advance the delay and sound timers by one tick."""
        self.state = tick(self.state)

    def step(self) -> Optional[DecodedInstruction]:
        """Run one fetch/decode/execute cycle.

        Returns:
            The executed instruction, or None when the step only polled for a
            pending key wait.
        """
        if self.awaiting_key:
            self._poll_key_wait()
            self._update_audio()
            return None

        self.state = self.state.replace(keypad=self._read_keypad())
        self.state, instruction = fetch(self.state)
        decoded = decode(instruction)
        self.state = execute_decoded(self.state, decoded)
        self.cycles += 1

        if decoded.operation is Operation.DRAW:
            self.presentation.present(self.framebuffer())
        elif decoded.operation is Operation.CLEAR_SCREEN:
            self.presentation.clear()
        elif decoded.operation is Operation.WAIT_KEY:
            self.input_source.clear_presses()
            logger.debug(f"Waiting for key into V{decoded.x:X}")

        self._update_audio()
        return decoded

    def run_frame(self, ticks: int = 1):
        """Advance the timers ``ticks`` times, then run ``instructions_per_frame`` steps."""
        for _ in range(ticks):
            self.tick()
        for _ in range(self.config.instructions_per_frame):
            self.step()

    def _read_keypad(self) -> np.ndarray:
        return np.fromiter((self.input_source.is_key_down(key) for key in range(NUM_KEYS)), dtype=np.bool_, count=NUM_KEYS)

    def _poll_key_wait(self):
        key = self.input_source.poll_key_press()
        if key is None:
            return
        self.state = resolve_key_wait(self.state, key)
        logger.debug(f"Key 0x{key:X} released the key wait")

    def _update_audio(self):
        if self.state.sound_on:
            self.audio.start_tone()
        else:
            self.audio.stop_tone()
