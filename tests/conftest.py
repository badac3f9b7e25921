import random

import pytest

from chip8vm import CPU, Machine


@pytest.fixture
def machine():
    return Machine()


@pytest.fixture
def cpu():
    return CPU(rng=random.Random(1234))


@pytest.fixture
def program(cpu):
    """Load 16-bit opcodes at 0x200 and return the CPU."""
    def load(*words):
        data = bytearray()
        for w in words:
            data += bytes((w >> 8, w & 0xFF))
        cpu.load_rom(data)
        return cpu
    return load
