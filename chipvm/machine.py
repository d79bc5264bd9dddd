"""Host-side driver owning one emulator state."""

import threading
import time
from typing import Optional

import jax
import numpy as np
from tqdm import tqdm

from chipvm.constants import TIMER_FREQUENCY
from chipvm.decode import decode
from chipvm.emulator import StepStatus, peek, step
from chipvm.errors import Chip8Error
from chipvm.logging import MachineLogger
from chipvm.quirks import Quirks
from chipvm.state import (
    EmulatorState, create_state, load_program, set_key, display_snapshot,
)
from chipvm.timers import tick_timers, sound_active


class Machine:
    """CHIP-8 machine for a host loop.

    Runs instructions at a target frequency against a 60 Hz timer cadence.
    Every access to the emulator state goes through one lock, so input
    collection, rendering and execution may live on different threads.
    """

    def __init__(
        self,
        program: Optional[bytes] = None,
        instruction_frequency: int = 700,
        fps: int = TIMER_FREQUENCY,
        quirks: Quirks = Quirks(),
        seed: int = 0,
        logger: Optional[MachineLogger] = None,
    ):
        """Initialize the machine.

        Args:
            program: Raw program image loaded at 0x200, if given
            instruction_frequency: CHIP-8 CPU frequency in Hz (typically 700)
            fps: Frame and timer rate in Hz (typically 60)
            quirks: Interpreter quirk flags
            seed: Seed of the random source used by CXNN
            logger: Logger for machine events, a default one if None
        """
        if instruction_frequency <= 0 or fps <= 0:
            raise ValueError(
                f"Frequencies must be positive, got instruction_frequency="
                f"{instruction_frequency}, fps={fps}"
            )
        self.instruction_frequency = instruction_frequency
        self.fps = fps
        self.quirks = quirks
        self.seed = seed
        self.logger = logger if logger is not None else MachineLogger()

        self._lock = threading.RLock()
        self._program = b""
        self._state = self._fresh_state()
        self.waiting_for_key = False

        if program is not None:
            self.load(program)

    @property
    def instructions_per_frame(self) -> int:
        """Number of instructions executed between two timer ticks."""
        return max(1, self.instruction_frequency // self.fps)

    @property
    def state(self) -> EmulatorState:
        with self._lock:
            return self._state

    def _fresh_state(self) -> EmulatorState:
        return create_state(jax.random.PRNGKey(self.seed), quirks=self.quirks)

    def load(self, program: bytes):
        """Reset the machine and load a program image."""
        with self._lock:
            state = load_program(self._fresh_state(), program)
            self._state = state
            self._program = bytes(program)
            self.waiting_for_key = False
        self.logger.log_program_loaded(len(program), {
            "instruction_frequency": self.instruction_frequency,
            "fps": self.fps,
            "quirks": self.quirks,
            "seed": self.seed,
        })

    def load_file(self, path: str):
        with open(path, 'rb') as f:
            self.load(f.read())

    def reset(self):
        """Restart the loaded program from a fresh state."""
        with self._lock:
            self._state = load_program(self._fresh_state(), self._program)
            self.waiting_for_key = False
        self.logger.info("Machine reset")

    def press_key(self, key: int):
        with self._lock:
            self._state = set_key(self._state, key, True)

    def release_key(self, key: int):
        with self._lock:
            self._state = set_key(self._state, key, False)

    def step(self) -> StepStatus:
        """Execute one instruction.

        On failure the error is logged and re-raised; the state stays at the
        last successfully executed instruction.
        """
        with self._lock:
            pc = int(self._state.pc)
            try:
                if self.logger.is_enabled_for("DEBUG") and not self.waiting_for_key:
                    self.logger.log_instruction(pc, decode(peek(self._state)))
                state, status = step(self._state)
            except Chip8Error as error:
                self.logger.log_fault(pc, error)
                raise

            if status is StepStatus.WAITING_FOR_KEY and not self.waiting_for_key:
                self.logger.debug(f"Waiting for key press at PC={pc:#05x}")
            self.waiting_for_key = status is StepStatus.WAITING_FOR_KEY
            self._state = state
            return status

    def tick(self):
        """Advance the delay and sound timers by one 60 Hz tick."""
        with self._lock:
            self._state = tick_timers(self._state)

    def run_frame(self) -> int:
        """Run one frame of instructions followed by a timer tick.

        Returns:
            Number of instructions executed, not counting steps spent
            waiting for a key
        """
        with self._lock:
            executed = 0
            for _ in range(self.instructions_per_frame):
                if self.step() is StepStatus.EXECUTED:
                    executed += 1
            self.tick()
            return executed

    def run(self, num_frames: int, progress: bool = False) -> int:
        """Run several frames back to back.

        Args:
            num_frames: Number of frames to run
            progress: Show a tqdm progress bar

        Returns:
            Total number of instructions executed
        """
        start_time = time.time()
        executed = 0
        with tqdm(range(num_frames), desc="Running", unit="frame", disable=not progress) as frames:
            for _ in frames:
                executed += self.run_frame()
                frames.set_postfix({"instructions": executed})
        self.logger.log_run_summary(num_frames, executed, time.time() - start_time)
        return executed

    def display(self) -> np.ndarray:
        """Read-only (32, 64) snapshot of the display."""
        with self._lock:
            return display_snapshot(self._state)

    @property
    def sound_active(self) -> bool:
        with self._lock:
            return sound_active(self._state)
