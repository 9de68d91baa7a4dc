"""CHIP-8 miscellaneous instructions (Fxxx)."""

from chipvm.constants import FONT_SPRITE_SIZE, FONT_START
from chipvm.cpu import CPUState, as_u8, as_u16, set_register
from chipvm.decode import DecodedInstruction
from chipvm.directive import NEXT, Directive
from chipvm.errors import UnimplementedOpcodeError
from chipvm.state import read_memory, write_memory


def execute_get_delay_timer(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX07 - Set VX to delay timer value."""
    return set_register(cpu, instruction.x, int(cpu.delay_timer)), NEXT


def execute_wait_for_key(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX0A - Latch a key wait into VX.

    PC still advances; the following ticks block on the latch until a key is pressed.
    """
    return cpu.replace(waiting_for_key=True, key_register=instruction.x), NEXT


def execute_set_delay_timer(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX15 - Set delay timer to VX."""
    return cpu.replace(delay_timer=as_u8(cpu.V[instruction.x])), NEXT


def execute_set_sound_timer(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX18 - Set sound timer to VX."""
    return cpu.replace(sound_timer=as_u8(cpu.V[instruction.x])), NEXT


def execute_add_to_index(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX1E - Add VX to I register (16-bit wrap, VF untouched)."""
    return cpu.replace(I=as_u16(int(cpu.I) + int(cpu.V[instruction.x]))), NEXT


def execute_font_character(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + int(cpu.V[instruction.x]) * FONT_SPRITE_SIZE
    return cpu.replace(I=as_u16(font_address)), NEXT


def execute_bcd_conversion(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(cpu.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return cpu.replace(machine=write_memory(cpu.machine, int(cpu.I), digits)), NEXT


def execute_store_registers(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    cpu = cpu.replace(machine=write_memory(cpu.machine, int(cpu.I), cpu.V[:count]))
    if cpu.quirks.load_store_increments_i:
        cpu = cpu.replace(I=as_u16(int(cpu.I) + count))
    return cpu, NEXT


def execute_load_registers(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    values = read_memory(cpu.machine, int(cpu.I), count)
    cpu = cpu.replace(V=cpu.V.at[:count].set(values))
    if cpu.quirks.load_store_increments_i:
        cpu = cpu.replace(I=as_u16(int(cpu.I) + count))
    return cpu, NEXT


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """Dispatch misc instructions on the low byte."""
    handler = MISC_INSTRUCTIONS.get(instruction.nn)
    if handler is None:
        raise UnimplementedOpcodeError(instruction.raw, int(cpu.pc))
    return handler(cpu, instruction, keyboard)
