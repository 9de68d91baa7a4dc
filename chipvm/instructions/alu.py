"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

from chipvm.cpu import CPUState, set_flag, set_register
from chipvm.decode import DecodedInstruction
from chipvm.directive import NEXT, Directive
from chipvm.errors import UnimplementedOpcodeError


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    return (vx - vy) & 0xFF, int(vx > vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    return (vy - vx) & 0xFF, int(vy > vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    0x0: alu_set,
    0x1: alu_or,
    0x2: alu_and,
    0x3: alu_xor,
    0x4: alu_add,
    0x5: alu_sub_xy,
    0x6: alu_shift_right,
    0x7: alu_sub_yx,
    0xE: alu_shift_left,
}

SHIFT_OPERATIONS = (0x6, 0xE)

# VF is written before VX, so with X = F the result wins. 8XY4 writes VF last.
FLAG_FIRST_OPERATIONS = (0x5, 0x6, 0x7, 0xE)


def execute_alu_operation(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """8XYN - ALU operations dispatcher.

    With X = F, SUB, SUBN and the shifts keep the result in VF while ADD
    keeps the carry.
    """
    operation = ALU_OPERATIONS.get(instruction.n)
    if operation is None:
        raise UnimplementedOpcodeError(instruction.raw, int(cpu.pc))

    vx = int(cpu.V[instruction.x])
    vy = int(cpu.V[instruction.y])
    if instruction.n in SHIFT_OPERATIONS and cpu.quirks.shift_uses_vy:
        vx = vy

    result, vf = operation(vx, vy)
    if vf is None:
        return set_register(cpu, instruction.x, result), NEXT
    if instruction.n in FLAG_FIRST_OPERATIONS:
        return set_register(set_flag(cpu, vf), instruction.x, result), NEXT
    return set_flag(set_register(cpu, instruction.x, result), vf), NEXT
