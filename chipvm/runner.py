"""Headless driver that ticks the engine repeatedly."""

from typing import Optional

from tqdm import tqdm

from chipvm.cpu import CPUState
from chipvm.engine import tick
from chipvm.keyboard import KeyboardDriver


def run(
    cpu: CPUState,
    keyboard: KeyboardDriver,
    num_ticks: int,
    elapsed_per_tick: Optional[float] = None,
    stop_on_halt: bool = True,
    progress: bool = False,
    desc: str = None,
) -> CPUState:
    """Tick the engine ``num_ticks`` times.

    Args:
        cpu: Engine to advance
        keyboard: Keyboard collaborator polled by the engine
        num_ticks: Maximum number of ticks
        elapsed_per_tick: Seconds passed to ``tick`` (only used by CLOCK timers)
        stop_on_halt: Return as soon as the engine halts
        progress: Show a tqdm progress bar
        desc: Progress bar description

    Returns:
        The engine after the last tick
    """
    if desc is None:
        desc = f"Running ({num_ticks:,} ticks)"

    with tqdm(total=num_ticks, desc=desc, unit="tick", disable=not progress) as bar:
        for _ in range(num_ticks):
            if stop_on_halt and cpu.halted:
                break
            cpu = tick(cpu, keyboard, elapsed_per_tick)
            bar.update(1)
    return cpu
