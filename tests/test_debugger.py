"""Tests for the disassembler and step debugger."""

import pytest

from chipvm import MemoryBoundsError, execute
from chipvm.debugger import (
    DebugMode, Debugger, describe_opcode, disassemble, dump_memory, format_registers,
)
from chipvm.logging import EmulatorLogger
from conftest import load_words


class TestDescribeOpcode:

    @pytest.mark.parametrize("opcode, text", [
        (0x0000, "HALT"),
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1300, "JP 0x300"),
        (0x2300, "CALL 0x300"),
        (0x3142, "SE V1, 0x42"),
        (0x5120, "SE V1, V2"),
        (0x6A0C, "LD VA, 0x0C"),
        (0x8126, "SHR V1 [, V2]"),
        (0x8127, "SUBN V1, V2"),
        (0xA123, "LD I, 0x123"),
        (0xB300, "JP V0, 0x300"),
        (0xD015, "DRW V0, V1, 5"),
        (0xE19E, "SKP V1"),
        (0xF10A, "LD V1, K"),
        (0xF155, "LD [I], V1"),
    ])
    def test_mnemonics(self, opcode, text):
        assert describe_opcode(opcode) == text

    @pytest.mark.parametrize("opcode", [0x0123, 0x5121, 0x8128, 0xE1FF, 0xF1FF])
    def test_unknown_opcode_renders_hex(self, opcode):
        assert describe_opcode(opcode) == f"0x{opcode:04X}"


def test_disassemble_ignores_odd_byte():
    listing = disassemble(bytes([0x00, 0xE0, 0x12, 0x00, 0xFF]))
    assert listing == [(0x200, 0x00E0, "CLS"), (0x202, 0x1200, "JP 0x200")]


def test_format_registers(fresh_cpu):
    cpu = execute(execute(fresh_cpu, 0x6A2A), 0x2400)
    lines = format_registers(cpu)
    assert "VA: 0x2A (42)" in lines
    assert "PC: 0x400 (1024)" in lines
    assert "SP: 0x1 (1)" in lines
    assert lines[-1] == "Stack: [0x202]"


def test_dump_memory(fresh_cpu):
    cpu = load_words(fresh_cpu, [0xA2F0])
    assert dump_memory(cpu, 0x200, 0x202) == ["0x200: A2", "0x201: F0"]
    assert len(dump_memory(cpu)) == 4096


@pytest.mark.parametrize("start, end", [(-1, 4), (0xFF0, 0x1001), (0x300, 0x200)])
def test_dump_memory_bad_range(fresh_cpu, start, end):
    with pytest.raises(MemoryBoundsError):
        dump_memory(fresh_cpu, start, end)


class TestDebugger:

    @pytest.fixture
    def debugger(self):
        return Debugger(logger=EmulatorLogger("Debugger", log_level="DEBUG", show_timestamps=False))

    def test_step_records_history(self, debugger, fresh_cpu, keypad):
        cpu = load_words(fresh_cpu, [0x6001, 0x6102])
        cpu = debugger.step(cpu, keypad)
        cpu = debugger.step(cpu, keypad)
        assert debugger.steps == 2
        assert debugger.history == [(0x200, 0x6001), (0x202, 0x6102)]
        assert cpu.V[1] == 2

    def test_disabled_is_silent(self, debugger, fresh_cpu, keypad, capsys):
        debugger.step(load_words(fresh_cpu, [0x6001]), keypad)
        assert capsys.readouterr().out == ""

    def test_step_mode_logs_mnemonic(self, debugger, fresh_cpu, keypad, capsys):
        debugger.set_mode(DebugMode.STEP)
        debugger.step(load_words(fresh_cpu, [0x6001]), keypad)
        out = capsys.readouterr().out
        assert "DEBUG MODE: STEP" in out
        assert "1 - 0x200: LD V0, 0x01" in out

    def test_cpu_info_mode_dumps_registers(self, debugger, fresh_cpu, keypad, capsys):
        debugger.set_mode(DebugMode.CPU_INFO)
        debugger.step(load_words(fresh_cpu, [0x6001]), keypad)
        out = capsys.readouterr().out
        assert "OPCODE: 0x6001" in out
        assert "V0: 0x01 (1)" in out

    def test_opcode_info_mode(self, debugger, fresh_cpu, keypad, capsys):
        debugger.set_mode(DebugMode.OPCODE_INFO)
        debugger.step(load_words(fresh_cpu, [0xD125]), keypad)
        assert "nibbles=(13, 1, 2, 5)" in capsys.readouterr().out

    def test_waiting_step_not_in_history(self, debugger, fresh_cpu, keypad):
        cpu = debugger.step(load_words(fresh_cpu, [0xF00A]), keypad)
        debugger.step(cpu, keypad)
        assert debugger.history == [(0x200, 0xF00A)]
        assert debugger.steps == 2

    def test_toggle_step(self, debugger):
        assert not debugger.enabled
        debugger.toggle_step()
        assert debugger.mode is DebugMode.STEP
        debugger.toggle_step()
        assert debugger.mode is DebugMode.DISABLED

    def test_print_program(self, debugger, capsys):
        debugger.print_program(bytes([0x12, 0x00]))
        assert "0x200: 1200  JP 0x200" in capsys.readouterr().out
