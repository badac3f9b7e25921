"""Machine state: memory, registers, framebuffer, stack, timers and keypad.

The state is a plain mutable object owned by one CPU. It holds no behaviour
besides bounds-checked access, so instructions can be tested against a bare
``Machine()``.
"""

import numpy as np

from . import config
from .errors import AddressError, StackOverflowError, StackUnderflowError


class Machine:

    def __init__(self):
        # ---- CPU state ----
        self.memory = bytearray(config.memory_size)         # max 4096 bytes
        self.registers = bytearray(config.register_count)   # V0..VF, VF doubles as the flag
        self.index_register = 0                             # I register (memory pointer), unmasked
        self.program_counter = config.program_start         # starts at 0x200
        self.stack = []                                     # return addresses, at most 16
        self.delay_timer = 0
        self.sound_timer = 0
        self.framebuffer = bytearray(config.width * config.height)  # 64x32 screen, y*64 + x
        self.keypad = [False] * config.key_count

    @property
    def stack_pointer(self):
        return len(self.stack)

    # ---- Memory ----
    def read_byte(self, address):
        if not 0 <= address < len(self.memory):
            raise AddressError("memory", address)
        return self.memory[address]

    def read_block(self, address, length):
        if address < 0 or address + length > len(self.memory):
            raise AddressError("memory", max(address, address + length - 1))
        return bytes(self.memory[address:address + length])

    def load(self, address, data):
        data = bytes(data)
        if address < 0 or address + len(data) > len(self.memory):
            raise AddressError("memory", address + len(data) - 1)
        self.memory[address:address + len(data)] = data

    def load_rom(self, data):
        """Copy raw ROM bytes into memory starting at 0x200."""
        self.load(config.program_start, data)
        config.log("Loaded ROM: %d bytes at 0x%03X" % (len(data), config.program_start))

    def load_fontset(self):
        self.load(config.font_address, config.fontset)

    # ---- Stack ----
    def push(self, address):
        if len(self.stack) >= config.stack_depth:
            raise StackOverflowError(len(self.stack))
        self.stack.append(address)

    def pop(self):
        if not self.stack:
            raise StackUnderflowError(0)
        return self.stack.pop()

    # ---- Input ----
    def set_key(self, key, pressed):
        if not 0 <= key < config.key_count:
            raise ValueError("CHIP-8 key must be 0x0-0xF, got %r" % (key,))
        self.keypad[key] = bool(pressed)

    def is_pressed(self, key):
        if not 0 <= key < config.key_count:
            raise AddressError("keypad", key)
        return self.keypad[key]

    # ---- Output ----
    def clear_screen(self):
        self.framebuffer[:] = bytes(len(self.framebuffer))

    def frame(self):
        """Read-only (height, width) view over the framebuffer, 1 = pixel on."""
        view = np.frombuffer(self.framebuffer, dtype=np.uint8).reshape(config.height, config.width)
        view.flags.writeable = False
        return view

    def __str__(self):
        regs = " ".join("V%X=%02X" % (i, v) for i, v in enumerate(self.registers))
        return "PC=%03X I=%03X SP=%d DT=%d ST=%d %s" % (
            self.program_counter, self.index_register, self.stack_pointer,
            self.delay_timer, self.sound_timer, regs)
