"""Console logging utilities for the chipvm emulator.

A small level-filtered console logger with optional colours and elapsed-time
stamps, plus an emulator-flavoured subclass used by the engine, the debugger
and the frontend.
"""

import sys
import time
from typing import Dict

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


def _level_index(level: str) -> int:
    level = level.upper()
    if level not in LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Available: {list(LEVELS)}")
    return LEVELS.index(level)


class ConsoleLogger:
    """Console logger with level filtering, colours and elapsed-time stamps.

    Colours are only emitted when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.set_level(log_level)
        self.use_colors = use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        self._threshold = _level_index(log_level)
        self.log_level = LEVELS[self._threshold]

    def _should_log(self, level: str) -> bool:
        return _level_index(level) >= self._threshold

    def _format_message(self, level: str, message: str) -> str:
        timestamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{COLORS[level]}{level_str}{RESET}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        level = level.upper()
        if self._should_log(level):
            print(self._format_message(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger with helpers for emulator lifecycle events."""

    def log_boot(self, config: Dict[str, object]):
        """Log the engine configuration."""
        self.info("=" * 60)
        self.info("Booting CHIP-8 with configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_program_loaded(self, num_bytes: int):
        self.info(f"{num_bytes} bytes loaded to memory")

    def log_halt(self, pc: int):
        self.info(f"Halting at 0x{pc:03X}")

    def log_error(self, error: Exception):
        self.error(f"{type(error).__name__}: {error}")
