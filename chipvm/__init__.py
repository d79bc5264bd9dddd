"""CHIP-8 virtual machine package."""

from chipvm.state import (
    EmulatorState, StackState, create_state, load_program, set_key, is_key_pressed,
    get_pixel, set_pixel, display_snapshot,
)
from chipvm.emulator import StepStatus, execute, dispatch, fetch, peek, step, load_rom
from chipvm.decode import DecodedInstruction, Op, decode
from chipvm.timers import tick_timers, sound_active, delay_active
from chipvm.quirks import Quirks, COSMAC_VIP, MODERN
from chipvm.errors import (
    Chip8Error, OutOfMemory, InvalidFetch, UnknownOpcode, StackOverflow, StackUnderflow,
)
from chipvm.constants import *
from chipvm.machine import Machine
from chipvm.rendering import display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "load_program",
    "load_rom",
    "set_key",
    "is_key_pressed",
    "get_pixel",
    "set_pixel",
    "display_snapshot",
    "StepStatus",
    "fetch",
    "peek",
    "execute",
    "dispatch",
    "step",
    "DecodedInstruction",
    "Op",
    "decode",
    "tick_timers",
    "sound_active",
    "delay_active",
    "Quirks",
    "COSMAC_VIP",
    "MODERN",
    "Chip8Error",
    "OutOfMemory",
    "InvalidFetch",
    "UnknownOpcode",
    "StackOverflow",
    "StackUnderflow",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "STACK_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "create_color_scheme",
]
