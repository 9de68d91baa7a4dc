"""Tests for system instructions (0xxx)."""

import pytest
import jax.numpy as jnp

from chipvm import StackOverflowError, StackUnderflowError, UnimplementedOpcodeError, execute
from chipvm.state import consume_display


def test_execute_clear_screen(fresh_cpu):
    """Test 00E0 - Clear display."""
    machine = fresh_cpu.machine
    machine = machine.replace(display=machine.display.at[0, 0].set(True).at[31, 63].set(True))
    machine, _ = consume_display(machine)
    cpu = fresh_cpu.replace(machine=machine)
    assert not cpu.display_dirty

    cpu = execute(cpu, 0x00E0)

    assert jnp.sum(cpu.display) == 0
    assert cpu.display_dirty
    assert cpu.pc == 0x202


def test_clear_screen_on_blank_display_still_marks_dirty(fresh_cpu):
    machine, _ = consume_display(fresh_cpu.machine)
    cpu = execute(fresh_cpu.replace(machine=machine), 0x00E0)
    assert cpu.display_dirty


def test_execute_call_and_return(fresh_cpu):
    """Test 2NNN (call) and 00EE (return) together."""
    cpu = fresh_cpu
    call_site = int(cpu.pc)

    # Call subroutine
    cpu = execute(cpu, 0x2300)  # Call 0x300
    assert cpu.pc == 0x300
    assert cpu.sp == 1
    assert cpu.machine.stack.data[0] == call_site

    # Return from subroutine
    cpu = execute(cpu, 0x00EE)  # Return
    assert cpu.pc == call_site + 2
    assert cpu.sp == 0


def test_nested_calls_unwind_in_order(fresh_cpu):
    cpu = fresh_cpu.replace(pc=jnp.asarray(0x240, dtype=jnp.uint16))
    cpu = execute(cpu, 0x2300)
    cpu = execute(cpu, 0x2400)
    assert cpu.sp == 2

    cpu = execute(cpu, 0x00EE)
    assert cpu.pc == 0x302
    cpu = execute(cpu, 0x00EE)
    assert cpu.pc == 0x242


def test_return_with_empty_stack(fresh_cpu):
    with pytest.raises(StackUnderflowError):
        execute(fresh_cpu, 0x00EE)


def test_call_beyond_stack_depth(fresh_cpu):
    cpu = fresh_cpu
    for _ in range(16):
        cpu = execute(cpu, 0x2200)
    assert cpu.sp == 16

    with pytest.raises(StackOverflowError):
        execute(cpu, 0x2200)


def test_halt(fresh_cpu):
    """Test 0000 - Halt keeps PC and sets the halt flag."""
    cpu = execute(fresh_cpu, 0x0000)
    assert cpu.halted
    assert cpu.pc == 0x200


@pytest.mark.parametrize("opcode", [0x0123, 0x00E1, 0x00FF, 0x0FFF])
def test_unknown_system_instruction(fresh_cpu, opcode):
    with pytest.raises(UnimplementedOpcodeError) as excinfo:
        execute(fresh_cpu, opcode)
    assert excinfo.value.opcode == opcode
    assert excinfo.value.address == 0x200


def test_unimplemented_opcode_error_without_address():
    error = UnimplementedOpcodeError(0x5121)
    assert error.address is None
    assert str(error) == "Unimplemented opcode 0x5121"
