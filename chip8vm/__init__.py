"""chip8vm: a CHIP-8 interpreter.

Machine state -> decoder -> instruction set -> cycle driver. The pyglet
window in ``chip8vm.frontend`` is one host; anything that calls
``CPU.cycle`` and ``CPU.tick`` and reads ``Machine.frame`` can be another.
"""

__version__ = "0.1.0"

from .machine import Machine
from .decoder import Instruction, Op, decode, fetch
from .instructions import execute
from .cpu import CPU
from .errors import (
    AddressError,
    Chip8Error,
    InvalidOpcodeError,
    StackError,
    StackOverflowError,
    StackUnderflowError,
)

__all__ = [
    "Machine", "Instruction", "Op", "decode", "fetch", "execute", "CPU",
    "Chip8Error", "InvalidOpcodeError", "StackError", "StackOverflowError",
    "StackUnderflowError", "AddressError",
]
