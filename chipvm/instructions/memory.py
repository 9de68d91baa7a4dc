"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp

from chipvm.cpu import CPUState, as_u16, set_register
from chipvm.decode import DecodedInstruction
from chipvm.directive import NEXT, Directive


def execute_set(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """6XNN - Set VX = NN."""
    return set_register(cpu, instruction.x, instruction.nn), NEXT


def execute_add(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """7XNN - Add NN to VX, wrapping. VF is left alone."""
    return set_register(cpu, instruction.x, int(cpu.V[instruction.x]) + instruction.nn), NEXT


def execute_set_index(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """ANNN - Set I = NNN."""
    return cpu.replace(I=as_u16(instruction.nnn)), NEXT


def execute_random(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(cpu.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    cpu = set_register(cpu, instruction.x, int(random_value) & instruction.nn)
    return cpu.replace(rng=key), NEXT
