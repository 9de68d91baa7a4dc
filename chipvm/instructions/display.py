"""CHIP-8 display operations."""

from chipvm.cpu import CPUState, set_flag
from chipvm.decode import DecodedInstruction
from chipvm.directive import NEXT, Directive
from chipvm.state import draw_sprite, read_memory


def execute_display(cpu: CPUState, instruction: DecodedInstruction, keyboard) -> tuple[CPUState, Directive]:
    """DXYN - Draw sprite at (VX, VY) with height N, OR any collision into VF."""
    sprite = read_memory(cpu.machine, int(cpu.I), instruction.n)
    machine, collision = draw_sprite(
        cpu.machine,
        int(cpu.V[instruction.x]),
        int(cpu.V[instruction.y]),
        sprite,
    )
    return set_flag(cpu.replace(machine=machine), int(cpu.V[0xF]) | int(collision)), NEXT
