"""Console logging utilities for the CHIP-8 machine.

Provides a small levelled console logger and a machine-specific subclass that
knows how to report program loads, instruction traces and interpreter faults.
"""

import time
import sys
from typing import Any, Dict

from chipvm.decode import DecodedInstruction

# WARNING has no messages of its own; it silences everything but faults
LEVELS = {"DEBUG": 0, "INFO": 1, "WARNING": 2, "ERROR": 3}

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "ERROR": "\033[31m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger printing to stdout."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(LEVELS)}"
            )
        self.name = name
        self.use_colors = use_colors and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS[level] >= LEVELS[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        tag = f"[{level:>5s}]"
        if self.use_colors:
            tag = f"{COLORS[level]}{tag}{RESET}"
        return f"{prefix}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        if self.is_enabled_for(level):
            print(self._format_message(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def error(self, message: str):
        self.log("ERROR", message)


class MachineLogger(ConsoleLogger):
    """Logger for the host loop, reporting interpreter events."""

    def __init__(self, name: str = "Chip8", **kwargs):
        super().__init__(name, **kwargs)

    def log_program_loaded(self, size: int, config: Dict[str, Any]):
        """Log program size and machine configuration."""
        self.info(f"Loaded program of {size} bytes")
        for key, value in config.items():
            self.debug(f"  {key}: {value}")

    def log_instruction(self, pc: int, instruction: DecodedInstruction):
        """Trace one executed instruction."""
        self.debug(f"{pc:#05x}: {instruction.raw:04X} {instruction.op.name}")

    def log_fault(self, pc: int, error: Exception):
        self.error(f"{type(error).__name__} at PC={pc:#05x}: {error}")

    def log_run_summary(self, frames: int, instructions: int, elapsed: float):
        rate = instructions / elapsed if elapsed > 0 else 0.0
        self.info(
            f"Ran {frames} frames, {instructions} instructions "
            f"in {elapsed:.2f}s ({rate:.0f} instr/s)"
        )
