"""Emulator configuration and CHIP-8 behaviour variants ("quirks").

Interpreters written over the years disagree on a handful of opcodes. Each
disagreement is a named option here rather than a hidden constant, so a ROM
written for a given interpreter can be run the way its author expected.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from chip8vm.constants import STACK_SIZE
from chip8vm.errors import ConfigError


class ShiftMode(Enum):
    """Source register of 8XY6 / 8XYE."""
    MODERN = "modern"  # VX = VX shifted
    LEGACY = "legacy"  # VX = VY shifted


class JumpMode(Enum):
    """Offset register of BNNN."""
    LEGACY = "legacy"  # PC = NNN + V0
    MODERN = "modern"  # PC = XNN + VX


class MemoryMode(Enum):
    """Index register after FX55 / FX65."""
    MODERN = "modern"  # I unchanged
    LEGACY = "legacy"  # I += X + 1


class SpriteEdgeMode(Enum):
    """What happens to sprite pixels past the screen edge."""
    WRAP = "wrap"
    CLIP = "clip"


class StackOverflowPolicy(Enum):
    RAISE = "raise"
    IGNORE = "ignore"


class UnknownOpcodePolicy(Enum):
    SKIP = "skip"
    RAISE = "raise"


@dataclass(frozen=True)
class EmulatorConfig:
    """Runtime configuration for the interpreter and its host.

    Attributes:
        shift_mode: Register shifted by 8XY6 / 8XYE.
        jump_mode: Register added by BNNN.
        memory_mode: Whether FX55 / FX65 advance the index register.
        sprite_edge_mode: Wrap or clip sprites at the screen edges.
        logic_resets_vf: Clear VF after 8XY1 / 8XY2 / 8XY3 (COSMAC VIP).
        index_overflow_flag: Set VF when FX1E carries past 0xFFF (Amiga).
        stack_depth: Maximum number of nested subroutine calls.
        stack_overflow_policy: Fail or ignore a call on a full stack.
        unknown_opcode_policy: Skip or fail on undocumented opcodes.
        timer_hz: Rate at which the driver calls ``tick()``.
        instructions_per_frame: Interpreter steps per timer tick.
        scale: Host window pixels per CHIP-8 pixel.
        color_scheme: Name understood by ``rendering.create_color_scheme``.
        tone_hz: Frequency of the buzzer tone.
        log_level: ConsoleLogger level name.
    """
    shift_mode: ShiftMode = ShiftMode.MODERN
    jump_mode: JumpMode = JumpMode.LEGACY
    memory_mode: MemoryMode = MemoryMode.MODERN
    sprite_edge_mode: SpriteEdgeMode = SpriteEdgeMode.WRAP
    logic_resets_vf: bool = False
    index_overflow_flag: bool = False
    stack_depth: int = STACK_SIZE
    stack_overflow_policy: StackOverflowPolicy = StackOverflowPolicy.RAISE
    unknown_opcode_policy: UnknownOpcodePolicy = UnknownOpcodePolicy.SKIP
    timer_hz: float = 60.0
    instructions_per_frame: int = 10
    scale: int = 10
    color_scheme: str = "classic"
    tone_hz: float = 440.0
    log_level: str = "INFO"


DEFAULT_CONFIG = EmulatorConfig()


def load_config(path: Optional[str] = None, overrides: Sequence[str] = ()) -> EmulatorConfig:
    """Build an EmulatorConfig from defaults, an optional YAML file and overrides.

    Args:
        path: YAML file whose keys are EmulatorConfig field names
        overrides: ``key=value`` strings, applied last (e.g. ``shift_mode=LEGACY``)

    Returns:
        Validated EmulatorConfig

    Raises:
        ConfigError: unknown key, wrong type or unreadable file
    """
    try:
        base = OmegaConf.structured(EmulatorConfig)
        OmegaConf.set_readonly(base, False)
        layers = [base]
        if path is not None:
            layers.append(OmegaConf.load(path))
        if overrides:
            layers.append(OmegaConf.from_dotlist(list(overrides)))
        merged = OmegaConf.merge(*layers)
        config = OmegaConf.to_object(merged)
    except (OmegaConfBaseException, OSError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    if config.stack_depth < 1:
        raise ConfigError("stack_depth must be at least 1")
    if config.timer_hz <= 0 or config.instructions_per_frame < 1:
        raise ConfigError("timer_hz and instructions_per_frame must be positive")
    return config
