"""CHIP-8 opcode decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """A 16-bit opcode split into its operand fields.

    ``opcode``, ``x``, ``y`` and ``n`` are the four nibbles from most to least
    significant; ``nn`` is the low byte and ``nnn`` the low 12 bits.
    """
    raw: int
    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @property
    def nibbles(self) -> tuple[int, int, int, int]:
        return self.opcode, self.x, self.y, self.n


def join_bytes(high: int, low: int) -> int:
    """Big-endian word from two consecutive memory bytes."""
    return (int(high) << 8) | int(low)


def decode(instruction: int) -> DecodedInstruction:
    instruction = int(instruction)
    if not 0 <= instruction <= 0xFFFF:
        raise ValueError(f"Opcode must fit in 16 bits, got 0x{instruction:X}")
    opcode, x, y, n = (instruction >> shift & 0xF for shift in (12, 8, 4, 0))
    return DecodedInstruction(
        raw=instruction, opcode=opcode, x=x, y=y, n=n,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )
