"""Cycle driver.

The host calls ``cycle()`` once per emulated instruction and ``tick()`` once
per 60 Hz frame; the two rates are independent. Errors raised from either
call are fatal for the session (see ``chip8vm.errors``).
"""

import random

from . import config
from .config import log
from .decoder import decode, fetch
from .display import render_text
from .instructions import execute
from .machine import Machine


class CPU:

    def __init__(self, machine=None, rng=None, on_tone=None):
        self.machine = machine if machine is not None else Machine()
        self.rng = rng if rng is not None else random.Random()
        self.on_tone = on_tone
        self.cycle_count = 0

    # ---- Load ROM ----
    def load_rom(self, data):
        self.machine.load_rom(data)

    def load_rom_file(self, path):
        log("Loading ROM:", path)
        with open(path, "rb") as f:
            data = f.read()
        self.load_rom(data)
        return len(data)

    # ---- Cycle ----
    def cycle(self):
        """Fetch, decode and execute one instruction; returns it."""
        machine = self.machine
        ins = decode(fetch(machine))
        log("%03X: %s" % (machine.program_counter, ins))
        machine.program_counter += 2
        execute(machine, ins, self.rng)
        self.cycle_count += 1
        return ins

    def run(self, cycles):
        for _ in range(cycles):
            self.cycle()

    # ---- Timers ----
    def tick(self):
        """Count both timers down once; True when the tone should start."""
        machine = self.machine
        if machine.delay_timer > 0:
            machine.delay_timer -= 1

        tone = False
        if machine.sound_timer > 0:
            if machine.sound_timer == 1:
                tone = True
                log("Sound plays!")
                if self.on_tone is not None:
                    self.on_tone()
            machine.sound_timer -= 1
        return tone

    def crash_report(self, error):
        """The fatal error, the register file and, with logs on, the screen."""
        lines = ["Emulation error: %s" % error, str(self.machine)]
        if config.logsOn:
            lines.append(render_text(self.machine.frame()))
        return "\n".join(lines)
