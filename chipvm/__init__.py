"""CHIP-8 virtual machine package."""

from chipvm.constants import (
    FONT_START, MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START, SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE,
)
from chipvm.cpu import CPUState, Quirks, TimerMode
from chipvm.decode import DecodedInstruction, decode
from chipvm.directive import Action, Directive
from chipvm.engine import (
    apply_directive, create_cpu, execute, fetch, is_sound_active, load_program, load_rom, reset, tick,
)
from chipvm.errors import (
    Chip8Error, MemoryBoundsError, ProgramTooLargeError, StackOverflowError, StackUnderflowError,
    UnimplementedOpcodeError,
)
from chipvm.keyboard import KeyboardDriver, Keypad
from chipvm.state import MachineState, StackState, create_state

__all__ = [
    "CPUState",
    "MachineState",
    "StackState",
    "Quirks",
    "TimerMode",
    "create_cpu",
    "create_state",
    "reset",
    "fetch",
    "execute",
    "tick",
    "apply_directive",
    "load_program",
    "load_rom",
    "is_sound_active",
    "DecodedInstruction",
    "decode",
    "Action",
    "Directive",
    "KeyboardDriver",
    "Keypad",
    "Chip8Error",
    "ProgramTooLargeError",
    "UnimplementedOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryBoundsError",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "MAX_PROGRAM_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
]
