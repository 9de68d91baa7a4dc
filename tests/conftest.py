"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp

from chipvm import Keypad, Quirks, create_cpu, load_program
from chipvm.engine import logger


@pytest.fixture(autouse=True)
def quiet_engine_logger():
    """Keep engine INFO chatter out of test output."""
    logger.set_level("WARNING")
    yield
    logger.set_level("INFO")


@pytest.fixture
def fresh_cpu():
    """Provide a fresh engine for each test."""
    return create_cpu()


@pytest.fixture
def legacy_cpu():
    """Provide a fresh engine with every quirk enabled."""
    return create_cpu(quirks=Quirks(shift_uses_vy=True, jump_uses_vx=True, load_store_increments_i=True))


@pytest.fixture
def keypad():
    """Provide a keypad with nothing pressed."""
    return Keypad()


def setup_sprite_in_memory(cpu, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    machine = cpu.machine
    return cpu.replace(machine=machine.replace(
        memory=machine.memory.at[address:address + len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    ))


def words_to_bytes(words):
    """Encode 16-bit opcodes as a big-endian program."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def load_words(cpu, words):
    """Load a list of 16-bit opcodes at 0x200."""
    return load_program(cpu, words_to_bytes(words))
