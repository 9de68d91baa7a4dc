"""CHIP-8 engine state: registers, timers and the key-wait latch."""

import enum

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, dataclass, field

from chipvm.constants import NUM_REGISTERS, PROGRAM_START
from chipvm.state import MachineState


class TimerMode(enum.Enum):
    """How the delay and sound timers are clocked.

    PER_TICK decrements once per executed tick. CLOCK decrements at
    ``timer_frequency`` Hz using the elapsed time the caller passes to ``tick``.
    """
    PER_TICK = "per_tick"
    CLOCK = "clock"


@dataclass
class Quirks:
    """Behavioural variants found in other CHIP-8 interpreters.

    All off reproduces the classic instruction table.
    """
    shift_uses_vy: bool = field(pytree_node=False, default=False)
    jump_uses_vx: bool = field(pytree_node=False, default=False)
    load_store_increments_i: bool = field(pytree_node=False, default=False)


class CPUState(PyTreeNode):
    """Main CHIP-8 engine state.

    The engine exclusively owns its ``machine`` (memory, stack, framebuffer).
    Collaborators may read any field between ticks but only ``tick`` and the
    loaders produce new states.
    """
    rng: jax.Array
    machine: MachineState
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    waiting_for_key: bool = False
    key_register: int = 0
    halted: bool = False
    timer_accumulator: float = 0.0
    quirks: Quirks = field(pytree_node=False, default=Quirks())
    timer_mode: TimerMode = field(pytree_node=False, default=TimerMode.PER_TICK)
    timer_frequency: float = field(pytree_node=False, default=60.0)
    timers_run_while_waiting: bool = field(pytree_node=False, default=False)

    @property
    def sp(self) -> int:
        return self.machine.stack.pointer

    @property
    def memory(self) -> jnp.ndarray:
        return self.machine.memory

    @property
    def display(self) -> jnp.ndarray:
        return self.machine.display

    @property
    def display_dirty(self) -> bool:
        return self.machine.display_dirty


def set_register(cpu: CPUState, index: int, value: int) -> CPUState:
    """Write an 8-bit value into V[index], wrapping to the register width."""
    return cpu.replace(V=cpu.V.at[index].set(int(value) & 0xFF))


def set_flag(cpu: CPUState, value: int) -> CPUState:
    """Write VF."""
    return set_register(cpu, 0xF, value)


def as_u16(value: int) -> jnp.ndarray:
    return jnp.asarray(int(value) & 0xFFFF, dtype=jnp.uint16)


def as_u8(value: int) -> jnp.ndarray:
    return jnp.asarray(int(value) & 0xFF, dtype=jnp.uint8)
