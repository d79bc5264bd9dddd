"""CHIP-8 interpreter error conditions."""


class Chip8Error(Exception):
    """Base for every error raised by the interpreter core."""
    pass


class OutOfMemory(Chip8Error):
    """Program image does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program of {size} bytes exceeds capacity of {capacity} bytes")


class InvalidFetch(Chip8Error):
    """Program counter points past the last complete instruction word."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Cannot fetch instruction at PC={pc:#05x}")


class UnknownOpcode(Chip8Error):
    """Instruction word does not match any known opcode pattern."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"Unknown opcode {opcode:#06x}")


class StackOverflow(Chip8Error):
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack full, cannot push return address {address:#05x}")


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Return with empty stack")
