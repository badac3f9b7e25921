# CHIP-8 machine constants and host defaults.
# Memory - 4096 bytes which includes: the (reserved) interpreter area, fonts, and the ROM at 0x200.
# Display - 64x32 monochrome, every cell is either on or off (0 || 1).

# ---- Configuration ----
scale = 10
width, height = 64, 32
cpu_hz = 500
timer_HZ = 60

# ---- Machine layout ----
memory_size = 4096
program_start = 0x200
register_count = 16
stack_depth = 16
key_count = 16
font_address = 0x000
font_glyph_size = 5

#make it true if you want the logs
logsOn = False


def log(*args):
    if logsOn:
        print(*args)


def set_logs(enabled):
    global logsOn
    logsOn = bool(enabled)
    return logsOn


# Standard CHIP-8 fontset (80 bytes)
fontset = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
]  # notice 80 bytes
