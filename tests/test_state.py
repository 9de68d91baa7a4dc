"""Tests for machine state: memory, stack and framebuffer."""

import jax.numpy as jnp
import pytest

from chipvm import MemoryBoundsError, StackOverflowError, StackUnderflowError, create_state
from chipvm.constants import FONT_DATA, STACK_SIZE
from chipvm.stack import frames, pop, push
from chipvm.state import (
    clear_display, consume_display, draw_sprite, load_rom, read_memory, read_opcode, write_memory,
)


class TestMemory:

    def test_font_loaded_at_zero(self):
        state = create_state()
        assert jnp.array_equal(state.memory[:80], FONT_DATA)
        assert jnp.sum(state.memory[80:]) == 0

    def test_read_opcode(self):
        state = write_memory(create_state(), 0x300, [0x12, 0x34])
        assert read_opcode(state, 0x300) == 0x1234

    @pytest.mark.parametrize("address", [0xFFF, 0x1000, -1])
    def test_read_opcode_out_of_bounds(self, address):
        with pytest.raises(MemoryBoundsError):
            read_opcode(create_state(), address)

    def test_read_memory_last_byte(self):
        state = write_memory(create_state(), 0xFFF, [0x7A])
        assert read_memory(state, 0xFFF, 1).tolist() == [0x7A]

    def test_write_memory_out_of_bounds(self):
        state = create_state()
        with pytest.raises(MemoryBoundsError) as excinfo:
            write_memory(state, 0xFFE, [1, 2, 3])
        assert excinfo.value.address == 0xFFE
        assert excinfo.value.length == 3

    def test_load_rom(self, tmp_path):
        rom = tmp_path / "pong.ch8"
        rom.write_bytes(bytes([0x6A, 0x02, 0x6B, 0x0C]))

        state = load_rom(create_state(), str(rom))

        assert state.memory[0x200:0x204].tolist() == [0x6A, 0x02, 0x6B, 0x0C]


class TestStack:

    def test_push_pop_order(self):
        stack = create_state().stack
        stack = push(stack, 0x202)
        stack = push(stack, 0x304)
        assert frames(stack).tolist() == [0x202, 0x304]

        stack, address = pop(stack)
        assert address == 0x304
        stack, address = pop(stack)
        assert address == 0x202
        assert stack.pointer == 0

    def test_push_full_stack(self):
        stack = create_state().stack
        for i in range(STACK_SIZE):
            stack = push(stack, 0x200 + 2 * i)
        with pytest.raises(StackOverflowError):
            push(stack, 0x400)

    def test_pop_empty_stack(self):
        with pytest.raises(StackUnderflowError):
            pop(create_state().stack)


class TestFramebuffer:

    def test_new_state_is_dirty(self):
        assert create_state().display_dirty

    def test_consume_display_clears_dirty(self):
        state, display = consume_display(create_state())
        assert not state.display_dirty
        assert display.shape == (32, 64)

    def test_clear_display(self):
        state, _ = consume_display(create_state())
        state, _ = draw_sprite(state, 0, 0, jnp.array([0xFF], dtype=jnp.uint8))
        state, _ = consume_display(state)

        state = clear_display(state)

        assert not jnp.any(state.display)
        assert state.display_dirty

    def test_draw_sprite_collision(self):
        sprite = jnp.array([0x81], dtype=jnp.uint8)
        state, collision = draw_sprite(create_state(), 62, 31, sprite)
        assert not collision
        assert state.display[31, 62]
        assert state.display[31, 5]  # last pixel of the row wraps to x = 69 % 64

        state, collision = draw_sprite(state, 62, 31, sprite)
        assert collision
        assert not jnp.any(state.display)
