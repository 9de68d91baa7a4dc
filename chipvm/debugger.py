"""Step debugger and disassembler for the CHIP-8 engine.

The debugger only reads engine state and advances it through ``tick``; it
never writes registers or memory directly.
"""

import enum
from typing import Callable, List, Optional, Tuple

from chipvm.constants import MEMORY_SIZE, PROGRAM_START
from chipvm.cpu import CPUState
from chipvm.decode import DecodedInstruction, decode, join_bytes
from chipvm.engine import fetch, tick
from chipvm.errors import MemoryBoundsError
from chipvm.keyboard import KeyboardDriver
from chipvm.logging import EmulatorLogger
from chipvm.stack import frames


class DebugMode(enum.Enum):
    DISABLED = "disabled"
    STEP = "step"
    CPU_INFO = "cpu_info"
    OPCODE_INFO = "opcode_info"


# (mask, pattern, formatter), first match wins.
_MNEMONICS: List[Tuple[int, int, Callable[[DecodedInstruction], str]]] = [
    (0xFFFF, 0x0000, lambda i: "HALT"),
    (0xFFFF, 0x00E0, lambda i: "CLS"),
    (0xFFFF, 0x00EE, lambda i: "RET"),
    (0xF000, 0x1000, lambda i: f"JP 0x{i.nnn:03X}"),
    (0xF000, 0x2000, lambda i: f"CALL 0x{i.nnn:03X}"),
    (0xF000, 0x3000, lambda i: f"SE V{i.x:X}, 0x{i.nn:02X}"),
    (0xF000, 0x4000, lambda i: f"SNE V{i.x:X}, 0x{i.nn:02X}"),
    (0xF00F, 0x5000, lambda i: f"SE V{i.x:X}, V{i.y:X}"),
    (0xF000, 0x6000, lambda i: f"LD V{i.x:X}, 0x{i.nn:02X}"),
    (0xF000, 0x7000, lambda i: f"ADD V{i.x:X}, 0x{i.nn:02X}"),
    (0xF00F, 0x8000, lambda i: f"LD V{i.x:X}, V{i.y:X}"),
    (0xF00F, 0x8001, lambda i: f"OR V{i.x:X}, V{i.y:X}"),
    (0xF00F, 0x8002, lambda i: f"AND V{i.x:X}, V{i.y:X}"),
    (0xF00F, 0x8003, lambda i: f"XOR V{i.x:X}, V{i.y:X}"),
    (0xF00F, 0x8004, lambda i: f"ADD V{i.x:X}, V{i.y:X}"),
    (0xF00F, 0x8005, lambda i: f"SUB V{i.x:X}, V{i.y:X}"),
    (0xF00F, 0x8006, lambda i: f"SHR V{i.x:X} [, V{i.y:X}]"),
    (0xF00F, 0x8007, lambda i: f"SUBN V{i.x:X}, V{i.y:X}"),
    (0xF00F, 0x800E, lambda i: f"SHL V{i.x:X} [, V{i.y:X}]"),
    (0xF00F, 0x9000, lambda i: f"SNE V{i.x:X}, V{i.y:X}"),
    (0xF000, 0xA000, lambda i: f"LD I, 0x{i.nnn:03X}"),
    (0xF000, 0xB000, lambda i: f"JP V0, 0x{i.nnn:03X}"),
    (0xF000, 0xC000, lambda i: f"RND V{i.x:X}, 0x{i.nn:02X}"),
    (0xF000, 0xD000, lambda i: f"DRW V{i.x:X}, V{i.y:X}, {i.n}"),
    (0xF0FF, 0xE09E, lambda i: f"SKP V{i.x:X}"),
    (0xF0FF, 0xE0A1, lambda i: f"SKNP V{i.x:X}"),
    (0xF0FF, 0xF007, lambda i: f"LD V{i.x:X}, DT"),
    (0xF0FF, 0xF00A, lambda i: f"LD V{i.x:X}, K"),
    (0xF0FF, 0xF015, lambda i: f"LD DT, V{i.x:X}"),
    (0xF0FF, 0xF018, lambda i: f"LD ST, V{i.x:X}"),
    (0xF0FF, 0xF01E, lambda i: f"ADD I, V{i.x:X}"),
    (0xF0FF, 0xF029, lambda i: f"LD F, V{i.x:X}"),
    (0xF0FF, 0xF033, lambda i: f"LD B, V{i.x:X}"),
    (0xF0FF, 0xF055, lambda i: f"LD [I], V{i.x:X}"),
    (0xF0FF, 0xF065, lambda i: f"LD V{i.x:X}, [I]"),
]


def describe_opcode(opcode: int) -> str:
    """Assembly mnemonic for an opcode; unknown words render as hex."""
    instruction = decode(opcode)
    for mask, pattern, formatter in _MNEMONICS:
        if instruction.raw & mask == pattern:
            return formatter(instruction)
    return f"0x{instruction.raw:04X}"


def disassemble(program: bytes, start: int = PROGRAM_START) -> List[Tuple[int, int, str]]:
    """List ``(address, opcode, mnemonic)`` for each word of a program.

    A trailing odd byte is ignored.
    """
    listing = []
    for offset in range(0, len(program) - 1, 2):
        opcode = join_bytes(program[offset], program[offset + 1])
        listing.append((start + offset, opcode, describe_opcode(opcode)))
    return listing


def format_registers(cpu: CPUState) -> List[str]:
    lines = [f"V{i:X}: 0x{int(cpu.V[i]):02X} ({int(cpu.V[i])})" for i in range(16)]
    lines += [
        f"I: 0x{int(cpu.I):03X} ({int(cpu.I)})",
        f"PC: 0x{int(cpu.pc):03X} ({int(cpu.pc)})",
        f"SP: 0x{cpu.sp:X} ({cpu.sp})",
        f"DT: 0x{int(cpu.delay_timer):X} ({int(cpu.delay_timer)})",
        f"ST: 0x{int(cpu.sound_timer):X} ({int(cpu.sound_timer)})",
        "Stack: [" + ", ".join(f"0x{int(a):03X}" for a in frames(cpu.machine.stack)) + "]",
    ]
    return lines


def dump_memory(cpu: CPUState, start: int = 0, end: int = MEMORY_SIZE) -> List[str]:
    """``0xADDR: XX`` lines for every byte in ``[start, end)``."""
    if start < 0 or end > MEMORY_SIZE or start > end:
        raise MemoryBoundsError(start, max(end - start, 1))
    memory = cpu.memory[start:end].tolist()
    return [f"0x{start + i:03X}: {value:02X}" for i, value in enumerate(memory)]


class Debugger:
    """Mode-driven step debugger.

    DISABLED ticks silently, STEP logs each executed opcode, CPU_INFO logs the
    opcode followed by a register dump, OPCODE_INFO logs the raw word and its
    decoded operands.
    """

    def __init__(self, logger: Optional[EmulatorLogger] = None, mode: DebugMode = DebugMode.DISABLED):
        self.logger = logger or EmulatorLogger("Debugger", log_level="DEBUG")
        self.mode = mode
        self.steps = 0
        self.history: List[Tuple[int, int]] = []

    def set_mode(self, mode: DebugMode):
        self.mode = DebugMode(mode)
        self.logger.info(f"DEBUG MODE: {self.mode.name}")

    def toggle_step(self):
        """Switch between DISABLED and STEP."""
        self.set_mode(DebugMode.DISABLED if self.mode is DebugMode.STEP else DebugMode.STEP)

    @property
    def enabled(self) -> bool:
        return self.mode is not DebugMode.DISABLED

    def step(self, cpu: CPUState, keyboard: KeyboardDriver, elapsed: Optional[float] = None) -> CPUState:
        """Tick once and log according to the current mode."""
        executes = not (cpu.halted or cpu.waiting_for_key)
        opcode = fetch(cpu) if executes else None
        pc = int(cpu.pc)

        cpu = tick(cpu, keyboard, elapsed)
        self.steps += 1

        if opcode is None:
            if self.enabled:
                state = "halted" if cpu.halted else "waiting for key"
                self.logger.debug(f"{self.steps} - 0x{pc:03X}: {state}")
            return cpu

        self.history.append((pc, opcode))
        if self.mode is DebugMode.STEP:
            self.logger.debug(f"{self.steps} - 0x{pc:03X}: {describe_opcode(opcode)}")
        elif self.mode is DebugMode.CPU_INFO:
            self.logger.debug(f"ADDR: 0x{pc:03X} | OPCODE: 0x{opcode:04X}: {describe_opcode(opcode)}")
            for line in format_registers(cpu):
                self.logger.debug(line)
        elif self.mode is DebugMode.OPCODE_INFO:
            instruction = decode(opcode)
            self.logger.debug(
                f"0x{pc:03X}: 0x{opcode:04X} nibbles={instruction.nibbles} "
                f"nn=0x{instruction.nn:02X} nnn=0x{instruction.nnn:03X}"
            )
        return cpu

    def print_registers(self, cpu: CPUState):
        for line in format_registers(cpu):
            self.logger.info(line)

    def print_memory(self, cpu: CPUState, start: int = 0, end: int = MEMORY_SIZE):
        for line in dump_memory(cpu, start, end):
            self.logger.info(line)

    def print_program(self, program: bytes):
        for address, opcode, text in disassemble(program):
            self.logger.info(f"0x{address:03X}: {opcode:04X}  {text}")
