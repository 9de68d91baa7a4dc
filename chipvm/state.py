"""CHIP-8 machine state: RAM, call stack and framebuffer."""

import jax.numpy as jnp
import numpy as np
from flax.struct import PyTreeNode, field

from chipvm.constants import (
    FONT_DATA, FONT_START, MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START,
    SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE,
)
from chipvm.decode import join_bytes
from chipvm.errors import MemoryBoundsError, ProgramTooLargeError


class StackState(PyTreeNode):
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class MachineState(PyTreeNode):
    """Addressable memory, call stack and framebuffer.

    The framebuffer is indexed ``[y, x]`` (32 rows of 64 pixels). ``display_dirty``
    is set whenever the framebuffer is written and cleared by ``consume_display``.
    """
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    stack: StackState = StackState()
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    display_dirty: bool = True


def create_state() -> MachineState:
    """Create initial machine state with font data loaded."""
    state = MachineState()
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def load_program(state: MachineState, program: bytes) -> MachineState:
    """Copy program bytes into memory starting at 0x200.

    Raises:
        ProgramTooLargeError: if the program does not fit in program space.
            Nothing is written in that case.
    """
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program), MAX_PROGRAM_SIZE)
    if not program:
        return state
    rom_array = jnp.asarray(np.frombuffer(bytes(program), dtype=np.uint8))
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load a raw ROM file into memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)


def _check_bounds(address: int, length: int):
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryBoundsError(address, length)


def read_opcode(state: MachineState, pc: int) -> int:
    """Read the big-endian 16-bit word at ``pc``."""
    _check_bounds(pc, 2)
    return join_bytes(state.memory[pc], state.memory[pc + 1])


def read_memory(state: MachineState, address: int, length: int) -> jnp.ndarray:
    """Read ``length`` bytes starting at ``address``."""
    _check_bounds(address, length)
    return state.memory[address:address + length]


def write_memory(state: MachineState, address: int, values) -> MachineState:
    """Write a byte sequence starting at ``address``."""
    values = jnp.asarray(values, dtype=jnp.uint8)
    _check_bounds(address, values.shape[0])
    return state.replace(memory=state.memory.at[address:address + values.shape[0]].set(values))


def clear_display(state: MachineState) -> MachineState:
    """Blank every pixel and mark the framebuffer dirty."""
    return state.replace(display=jnp.zeros_like(state.display), display_dirty=True)


def draw_sprite(state: MachineState, x: int, y: int, sprite: jnp.ndarray) -> tuple[MachineState, bool]:
    """XOR sprite rows onto the framebuffer at (x, y), wrapping around the edges.

    Returns the new state and whether any lit pixel was erased.
    """
    if sprite.shape[0] == 0:
        return state.replace(display_dirty=True), False

    rows = jnp.arange(sprite.shape[0])[:, None]
    cols = jnp.arange(8)[None, :]
    bits = ((sprite.astype(jnp.int32)[:, None] >> (7 - cols)) & 1).astype(jnp.bool_)

    ys = jnp.broadcast_to((y + rows) % SCREEN_HEIGHT, bits.shape)
    xs = jnp.broadcast_to((x + cols) % SCREEN_WIDTH, bits.shape)

    current = state.display[ys, xs]
    collision = bool(jnp.any(current & bits))
    new_display = state.display.at[ys, xs].set(current ^ bits)
    return state.replace(display=new_display, display_dirty=True), collision


def consume_display(state: MachineState) -> tuple[MachineState, jnp.ndarray]:
    """Return the framebuffer and clear the dirty flag."""
    return state.replace(display_dirty=False), state.display
