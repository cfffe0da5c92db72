"""CHIP-8 ALU operations (8xxx).

Each ``alu_*`` function takes the two operand values and returns
``(result, flag)``. A flag of ``None`` leaves VF untouched. The flag is
written after the result, so ``8FY4`` and friends end with VF holding the
flag rather than the arithmetic result.
"""

from typing import Callable, Optional

from chip8vm.config import ShiftMode
from chip8vm.constants import FLAG_REGISTER
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Operation

AluResult = tuple[int, Optional[int]]


def alu_set(vx: int, vy: int) -> AluResult:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> AluResult:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> AluResult:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> AluResult:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> AluResult:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> AluResult:
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> AluResult:
    """8XY6 - Shift right: VX >>= 1, VF = old bit 0."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> AluResult:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> AluResult:
    """8XYE - Shift left: VX <<= 1, VF = old bit 7."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS: dict[Operation, Callable[[int, int], AluResult]] = {
    Operation.MOVE: alu_set,
    Operation.OR: alu_or,
    Operation.AND: alu_and,
    Operation.XOR: alu_xor,
    Operation.ADD_REG: alu_add,
    Operation.SUB_XY: alu_sub_xy,
    Operation.SHIFT_RIGHT: alu_shift_right,
    Operation.SUB_YX: alu_sub_yx,
    Operation.SHIFT_LEFT: alu_shift_left,
}

_SHIFTS = (Operation.SHIFT_RIGHT, Operation.SHIFT_LEFT)
_LOGIC = (Operation.OR, Operation.AND, Operation.XOR)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])
    operation = instruction.operation

    if operation in _SHIFTS and state.config.shift_mode is ShiftMode.LEGACY:
        vx = vy

    result, vf = ALU_OPERATIONS[operation](vx, vy)
    if vf is None and operation in _LOGIC and state.config.logic_resets_vf:
        vf = 0

    state = state.set_register(instruction.x, result)
    if vf is not None:
        state = state.set_register(FLAG_REGISTER, vf)
    return state
