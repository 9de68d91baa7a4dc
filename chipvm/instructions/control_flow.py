"""CHIP-8 control flow instructions."""

from chipvm.cpu import CPUState
from chipvm.decode import DecodedInstruction
from chipvm.directive import Directive, jump, skip_if
from chipvm.errors import UnimplementedOpcodeError
from chipvm.stack import push


def execute_jump(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """1NNN - Jump to address NNN."""
    return cpu, jump(instruction.nnn)


def execute_call(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """2NNN - Call subroutine at NNN."""
    stack = push(cpu.machine.stack, int(cpu.pc))
    return cpu.replace(machine=cpu.machine.replace(stack=stack)), jump(instruction.nnn)


def make_skip_instruction(condition_fn, require_zero_n: bool = False):
    """Factory for skip instructions."""
    def skip_instruction(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
        if require_zero_n and instruction.n != 0:
            raise UnimplementedOpcodeError(instruction.raw, int(cpu.pc))
        return cpu, skip_if(condition_fn(cpu, instruction))
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda cpu, inst: int(cpu.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda cpu, inst: int(cpu.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda cpu, inst: int(cpu.V[inst.x]) == int(cpu.V[inst.y]),
    require_zero_n=True,
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda cpu, inst: int(cpu.V[inst.x]) != int(cpu.V[inst.y]),
    require_zero_n=True,
)


def execute_jump_with_offset(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """BNNN - Jump to address NNN + V0 (NNN + VX with the jump_uses_vx quirk)."""
    register = instruction.x if cpu.quirks.jump_uses_vx else 0
    return cpu, jump(instruction.nnn + int(cpu.V[register]))


def execute_skip_if_key(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    if instruction.nn not in (0x9E, 0xA1):
        raise UnimplementedOpcodeError(instruction.raw, int(cpu.pc))

    key_index = int(cpu.V[instruction.x]) & 0xF
    key_pressed = keyboard.is_key_pressed(key_index)
    is_not_instruction = (instruction.nn == 0xA1)
    return cpu, skip_if(key_pressed ^ is_not_instruction)
