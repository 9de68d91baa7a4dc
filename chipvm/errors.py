"""Exceptions raised by the CHIP-8 core."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error surfaced by the emulator."""


class ProgramTooLargeError(Chip8Error):
    """Program does not fit in the 0x200-0xFFF program space."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Program is {size} bytes, the interpreter only has room for {limit}")
        self.size = size
        self.limit = limit


class UnimplementedOpcodeError(Chip8Error):
    """Opcode is not one of the 35 CHIP-8 instructions."""

    def __init__(self, opcode: int, address: Optional[int] = None):
        location = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Unimplemented opcode 0x{opcode:04X}{location}")
        self.opcode = opcode
        self.address = address


class StackOverflowError(Chip8Error):
    """CALL issued with all stack frames in use."""


class StackUnderflowError(Chip8Error):
    """RET issued with an empty stack."""


class MemoryBoundsError(Chip8Error):
    """Memory access past the end of the 4KB address space."""

    def __init__(self, address: int, length: int = 1):
        super().__init__(f"Memory access 0x{address:X}..0x{address + length - 1:X} is out of bounds")
        self.address = address
        self.length = length
