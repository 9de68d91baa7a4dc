"""Control-flow directives returned by instruction handlers."""

import enum

from flax.struct import dataclass, field


class Action(enum.Enum):
    NEXT = "next"
    SKIP = "skip"
    JUMP = "jump"
    HALT = "halt"


@dataclass
class Directive:
    """What the engine does with the program counter after an instruction.

    NEXT advances PC by one opcode, SKIP by two, JUMP sets PC to ``address``
    and HALT stops further decoding.
    """
    action: Action = field(pytree_node=False)
    address: int = 0


NEXT = Directive(Action.NEXT)
SKIP = Directive(Action.SKIP)
HALT = Directive(Action.HALT)


def jump(address: int) -> Directive:
    """Directive setting PC to ``address``."""
    return Directive(Action.JUMP, int(address))


def skip_if(condition) -> Directive:
    """SKIP when ``condition`` holds, NEXT otherwise."""
    return SKIP if condition else NEXT
