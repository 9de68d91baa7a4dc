"""Main CHIP-8 emulator execution engine."""

from typing import Optional

import jax

from chipvm.constants import OPCODE_SIZE
from chipvm.cpu import CPUState, Quirks, TimerMode, as_u8, as_u16, set_register
from chipvm.decode import decode
from chipvm.directive import Action, Directive
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.control_flow import (
    execute_call, execute_jump, execute_jump_with_offset, execute_skip_if_equal_immediate,
    execute_skip_if_equal_register, execute_skip_if_key, execute_skip_if_not_equal_immediate,
    execute_skip_if_not_equal_register,
)
from chipvm.instructions.display import execute_display
from chipvm.instructions.memory import execute_add, execute_random, execute_set, execute_set_index
from chipvm.instructions.misc import execute_misc_instruction
from chipvm.instructions.system import execute_system_instruction
from chipvm.keyboard import KeyboardDriver, Keypad
from chipvm.logging import EmulatorLogger
from chipvm.state import create_state, read_opcode
from chipvm.state import load_program as load_machine_program

logger = EmulatorLogger("Engine")

# Indexed by the first nibble of the opcode.
INSTRUCTION_TABLE = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def create_cpu(
    rng: Optional[jax.Array] = None,
    quirks: Quirks = Quirks(),
    timer_mode: TimerMode = TimerMode.PER_TICK,
    timer_frequency: float = 60.0,
    timers_run_while_waiting: bool = False,
) -> CPUState:
    """Create a fresh engine with PC=0x200 and a font-loaded machine state."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    if timer_frequency <= 0:
        raise ValueError(f"timer_frequency must be positive, got {timer_frequency}")
    return CPUState(
        rng=rng,
        machine=create_state(),
        quirks=quirks,
        timer_mode=TimerMode(timer_mode),
        timer_frequency=float(timer_frequency),
        timers_run_while_waiting=timers_run_while_waiting,
    )


def reset(cpu: CPUState) -> CPUState:
    """Fresh engine and machine with the same configuration and random key."""
    return create_cpu(
        rng=cpu.rng,
        quirks=cpu.quirks,
        timer_mode=cpu.timer_mode,
        timer_frequency=cpu.timer_frequency,
        timers_run_while_waiting=cpu.timers_run_while_waiting,
    )


def load_program(cpu: CPUState, program: bytes) -> CPUState:
    """Load program bytes at 0x200. Registers are not reset."""
    cpu = cpu.replace(machine=load_machine_program(cpu.machine, program))
    logger.log_program_loaded(len(program))
    return cpu


def load_rom(cpu: CPUState, filename: str) -> CPUState:
    """Load a raw ROM file at 0x200."""
    with open(filename, "rb") as f:
        program = f.read()
    logger.info(f"Loading ROM {filename}")
    return load_program(cpu, program)


def fetch(cpu: CPUState) -> int:
    """Fetch the opcode at PC."""
    return read_opcode(cpu.machine, int(cpu.pc))


def apply_directive(cpu: CPUState, directive: Directive) -> CPUState:
    """Apply a handler's control-flow directive to the program counter."""
    if directive.action is Action.NEXT:
        return cpu.replace(pc=as_u16(int(cpu.pc) + OPCODE_SIZE))
    if directive.action is Action.SKIP:
        return cpu.replace(pc=as_u16(int(cpu.pc) + 2 * OPCODE_SIZE))
    if directive.action is Action.JUMP:
        return cpu.replace(pc=as_u16(directive.address))
    logger.log_halt(int(cpu.pc))
    return cpu.replace(halted=True)


def execute(cpu: CPUState, instruction: int, keyboard: Optional[KeyboardDriver] = None) -> CPUState:
    """Execute single CHIP-8 instruction and apply its directive.

    Timers and the key-wait latch are not consulted; that is ``tick``'s job.
    """
    if keyboard is None:
        keyboard = Keypad()
    decoded_instruction = decode(instruction)
    handler = INSTRUCTION_TABLE[decoded_instruction.opcode]
    cpu, directive = handler(cpu, decoded_instruction, keyboard)
    return apply_directive(cpu, directive)


def _decrement(timer, steps: int):
    return as_u8(max(int(timer) - steps, 0))


def update_timers(cpu: CPUState, elapsed: Optional[float] = None) -> CPUState:
    """Count the delay and sound timers down according to the timer mode.

    In CLOCK mode ``elapsed`` is the wall time in seconds since the previous
    tick; ``None`` counts as no time passing.
    """
    if cpu.timer_mode is TimerMode.PER_TICK:
        steps = 1
        accumulator = cpu.timer_accumulator
    else:
        accumulator = cpu.timer_accumulator + (elapsed or 0.0) * cpu.timer_frequency
        steps = int(accumulator)
        accumulator -= steps

    if steps:
        cpu = cpu.replace(
            delay_timer=_decrement(cpu.delay_timer, steps),
            sound_timer=_decrement(cpu.sound_timer, steps),
        )
    return cpu.replace(timer_accumulator=accumulator)


def _resolve_key_wait(cpu: CPUState, keyboard: KeyboardDriver) -> CPUState:
    key = keyboard.get_key()
    if key is None:
        return cpu
    logger.debug(f"Key {key:X} pressed, resuming into V{cpu.key_register:X}")
    cpu = set_register(cpu, cpu.key_register, key)
    return cpu.replace(waiting_for_key=False)


def tick(cpu: CPUState, keyboard: KeyboardDriver, elapsed: Optional[float] = None) -> CPUState:
    """Advance the engine by one step.

    A halted engine does nothing. While the key-wait latch is set only the
    keyboard is polled (timers run only if ``timers_run_while_waiting``).
    Otherwise timers are updated and exactly one instruction is executed.
    """
    if cpu.halted:
        return cpu

    if cpu.waiting_for_key:
        if cpu.timers_run_while_waiting:
            cpu = update_timers(cpu, elapsed)
        return _resolve_key_wait(cpu, keyboard)

    cpu = update_timers(cpu, elapsed)
    return execute(cpu, fetch(cpu), keyboard)


def is_sound_active(cpu: CPUState) -> bool:
    """The buzzer sounds while the sound timer is non-zero."""
    return int(cpu.sound_timer) > 0


def engine_config(cpu: CPUState) -> dict:
    """Static configuration of an engine, for logging and display."""
    return {
        "quirks": cpu.quirks,
        "timer_mode": cpu.timer_mode.value,
        "timer_frequency": cpu.timer_frequency,
        "timers_run_while_waiting": cpu.timers_run_while_waiting,
    }
