"""pygame implementations of the host collaborators."""

from collections import deque
from typing import Deque, List, Optional

import numpy as np
import pygame

from chip8vm.config import EmulatorConfig
from chip8vm.constants import KEY_LAYOUT, NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.interfaces import AudioActuator, InputSource, NullAudio, Presentation
from chip8vm.logging import get_logger
from chip8vm.rendering import create_color_scheme, framebuffer_to_rgb

logger = get_logger("chip8vm.host")

KEY_MAP = {getattr(pygame, f"K_{name}"): value for name, value in KEY_LAYOUT.items()}

SAMPLE_RATE = 44100
AMPLITUDE = 4096


class PygameDisplay(Presentation):
    """Scaled window showing the framebuffer."""

    def __init__(self, scale: int = 10, color_scheme: str = "classic", caption: str = "chip8vm"):
        self.scale = scale
        self.on_color, self.off_color = create_color_scheme(color_scheme)
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
        pygame.display.set_caption(caption)
        self.clear()

    def present(self, framebuffer: List[int]) -> None:
        rgb = framebuffer_to_rgb(framebuffer, self.scale, self.on_color, self.off_color)
        # surfarray wants (width, height, 3)
        pygame.surfarray.blit_array(self.screen, rgb.swapaxes(0, 1))
        pygame.display.flip()

    def clear(self) -> None:
        self.screen.fill(self.off_color)
        pygame.display.flip()


class PygameBuzzer(AudioActuator):
    """Continuous sine tone played in a loop while the sound timer runs."""

    def __init__(self, tone_hz: float = 440.0):
        length = SAMPLE_RATE / tone_hz
        omega = np.pi * 2 / length
        one_cycle = AMPLITUDE * np.sin(np.arange(int(length)) * omega)
        wave = np.resize(one_cycle, (SAMPLE_RATE,)).astype(np.int16)
        channels = pygame.mixer.get_init()[2]
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.sndarray.make_sound(np.ascontiguousarray(wave))
        self.playing = False

    def start_tone(self) -> None:
        if not self.playing:
            self.sound.play(-1)
            self.playing = True

    def stop_tone(self) -> None:
        if self.playing:
            self.sound.stop()
            self.playing = False


class PygameKeyboard(InputSource):
    """Keyboard state fed from pygame events by the driver loop."""

    def __init__(self):
        self.keys = [False] * NUM_KEYS
        self.presses: Deque[int] = deque()

    def handle_event(self, event) -> None:
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return
        key = KEY_MAP.get(event.key)
        if key is None:
            return
        down = event.type == pygame.KEYDOWN
        self.keys[key] = down
        if down:
            self.presses.append(key)

    def is_key_down(self, key: int) -> bool:
        return self.keys[key & 0xF]

    def poll_key_press(self) -> Optional[int]:
        return self.presses.popleft() if self.presses else None

    def clear_presses(self) -> None:
        self.presses.clear()


def create_audio(config: EmulatorConfig) -> AudioActuator:
    """Open the mixer, falling back to silence when no audio device exists."""
    try:
        pygame.mixer.init(SAMPLE_RATE, -16, 1, 512)
        return PygameBuzzer(config.tone_hz)
    except pygame.error as exc:
        logger.warning(f"Audio disabled: {exc}")
        return NullAudio()
