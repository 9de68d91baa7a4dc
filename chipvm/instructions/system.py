"""CHIP-8 system instructions (0x0xxx)."""

from chipvm.cpu import CPUState
from chipvm.decode import DecodedInstruction
from chipvm.directive import HALT, NEXT, Directive
from chipvm.errors import UnimplementedOpcodeError
from chipvm.stack import pop
from chipvm.state import clear_display


def execute_halt(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """0000 - Stop decoding instructions."""
    return cpu, HALT


def execute_clear_screen(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """00E0 - Clear display."""
    return cpu.replace(machine=clear_display(cpu.machine)), NEXT


def execute_return(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """00EE - Return from subroutine."""
    stack, address = pop(cpu.machine.stack)
    return cpu.replace(machine=cpu.machine.replace(stack=stack), pc=address), NEXT


SYSTEM_INSTRUCTIONS = {
    0x0000: execute_halt,
    0x00E0: execute_clear_screen,
    0x00EE: execute_return,
}


def execute_system_instruction(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """Dispatch system instructions."""
    handler = SYSTEM_INSTRUCTIONS.get(instruction.raw)
    if handler is None:
        raise UnimplementedOpcodeError(instruction.raw, int(cpu.pc))
    return handler(cpu, instruction, keyboard)
