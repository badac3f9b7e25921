# We're subclassing pyglet (that'll handle graphics, sound output, and keyboard handling)
# and overriding whatever def we need from there. The CPU itself knows nothing about pyglet:
# this window only paces it, feeds it keys and draws its framebuffer.

import random

import pyglet
from pyglet.media import synthesis
from pyglet.window import key

from . import config
from .config import log
from .cpu import CPU
from .display import to_rgba
from .errors import Chip8Error

#map binding keys
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


class Chip8Window(pyglet.window.Window):

    def __init__(self, cpu=None, scale=config.scale, cpu_hz=config.cpu_hz):
        self.pixel_scale = scale
        self.cpu_hz = cpu_hz
        super().__init__(
            width=config.width * scale,
            height=config.height * scale,
            caption="CHIP-8 Emulator",
            resizable=False,
            vsync=False
        )

        self.cpu = cpu if cpu is not None else CPU()
        self.cpu.on_tone = self._play_beep
        self.has_exit = False
        self.sound_playing = False

        # ---- Performance Counters ----
        self._fps_counter = 0
        self._cps_counter = 0
        self.fps_label = self._hud_label("FPS: 0", self.height - 15)
        self.cps_label = self._hud_label("Cycles/s: 0", self.height - 30)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

        #creating ImageData once, updated in place on every draw
        self.image = pyglet.image.ImageData(
            self.width,
            self.height,
            'RGBA',
            to_rgba(self.cpu.machine.frame(), scale).tobytes()
        )

        # Schedule CPU and timer ticks
        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / cpu_hz)
        pyglet.clock.schedule_interval(self._timer_tick, 1.0 / config.timer_HZ)

    def _hud_label(self, text, y):
        return pyglet.text.Label(
            text,
            font_size=12,
            x=5,
            y=y,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )

    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        self.cps_label.text = f"Cycles/s: {self._cps_counter}"
        self._fps_counter = 0
        self._cps_counter = 0

    # ---- Sound ----
    def _play_beep(self, base_freq=440, duration=0.2, pitch_variation=15):
        if self.sound_playing:
            return
        freq = base_freq + random.randint(-pitch_variation, pitch_variation)
        wave = synthesis.Sine(duration=duration, frequency=freq, sample_rate=44100)

        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.sound_playing = True

        def on_eos():
            self.sound_playing = False
            player.delete()

        player.on_eos = on_eos

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.dispatch_event("on_close")
            return
        if symbol in keymap:
            self.cpu.machine.set_key(keymap[symbol], True)
        if symbol == key.F1:
            log("logsOn:", config.set_logs(not config.logsOn))

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in keymap:
            self.cpu.machine.set_key(keymap[symbol], False)

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        rgba = to_rgba(self.cpu.machine.frame(), self.pixel_scale)
        self.image.set_data('RGBA', self.width * 4, rgba.tobytes())
        self.image.blit(0, 0)
        self.fps_label.draw()
        self.cps_label.draw()
        self._fps_counter += 1

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        if self.has_exit:
            return
        # cycles owed since the last callback
        cycles = max(1, round(dt * self.cpu_hz))
        try:
            for _ in range(cycles):
                self.cpu.cycle()
                self._cps_counter += 1
        except Chip8Error as e:
            print(self.cpu.crash_report(e))
            self._stop()
            self.close()

    # ---- timers ----
    def _timer_tick(self, dt):
        if not self.has_exit:
            self.cpu.tick()

    def _stop(self):
        self.has_exit = True
        pyglet.clock.unschedule(self._cpu_tick)
        pyglet.clock.unschedule(self._timer_tick)
        pyglet.clock.unschedule(self._update_bench)

    def on_close(self):
        self._stop()
        super().on_close()
