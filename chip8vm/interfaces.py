"""Host collaborators the interpreter drives.

The interpreter only talks to these abstract interfaces; ``pygame_host``
provides the concrete window, buzzer and keyboard.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class Presentation(ABC):
    @abstractmethod
    def present(self, framebuffer: List[int]) -> None:
        """Show a frame: 32 row words, bit x of word y set when pixel (x, y) is lit."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Fill the surface with the background colour."""
        pass


class AudioActuator(ABC):
    @abstractmethod
    def start_tone(self) -> None:
        """Start the continuous tone. Calling it while playing does nothing."""
        pass

    @abstractmethod
    def stop_tone(self) -> None:
        """Silence the tone. Calling it while silent does nothing."""
        pass


class InputSource(ABC):
    @abstractmethod
    def is_key_down(self, key: int) -> bool:
        """Whether CHIP-8 key ``key`` (0x0-0xF) is currently held."""
        pass

    @abstractmethod
    def poll_key_press(self) -> Optional[int]:
        """Return the next CHIP-8 key-down event since the last call, if any."""
        pass

    @abstractmethod
    def clear_presses(self) -> None:
        """Drop key-down events that have not been polled yet."""
        pass


class NullPresentation(Presentation):
    """Presentation that discards frames (headless runs)."""

    def present(self, framebuffer: List[int]) -> None:
        pass

    def clear(self) -> None:
        pass


class NullAudio(AudioActuator):
    def start_tone(self) -> None:
        pass

    def stop_tone(self) -> None:
        pass


class NullInput(InputSource):
    """Input source with no keys ever pressed."""

    def is_key_down(self, key: int) -> bool:
        return False

    def poll_key_press(self) -> Optional[int]:
        return None

    def clear_presses(self) -> None:
        pass
