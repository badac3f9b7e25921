"""The CHIP-8 instruction set.

Each handler takes ``(machine, ins, rng)`` and mutates the machine in place.
The cycle driver has already moved the program counter past the opcode, so
skips add another 2 and jumps overwrite it.

Reference: Cowgod's CHIP-8 Technical Reference
http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
"""

from . import config
from .config import log
from .decoder import Op
from .errors import InvalidOpcodeError


# ---- 00E0 / 00EE ----

def _cls(machine, ins, rng):
    machine.clear_screen()


def _ret(machine, ins, rng):
    machine.program_counter = machine.pop()


# ---- Jumps and calls ----

def _jp(machine, ins, rng):
    machine.program_counter = ins.addr


def _call(machine, ins, rng):
    # the pc already points at the next instruction
    machine.push(machine.program_counter)
    machine.program_counter = ins.addr


def _jp_v0(machine, ins, rng):
    machine.program_counter = ins.addr + machine.registers[0]


# ---- Conditional skips ----

def _skip_if(machine, condition):
    if condition:
        machine.program_counter += 2


def _se_vx_kk(machine, ins, rng):
    _skip_if(machine, machine.registers[ins.x] == ins.kk)


def _sne_vx_kk(machine, ins, rng):
    _skip_if(machine, machine.registers[ins.x] != ins.kk)


def _se_vx_vy(machine, ins, rng):
    _skip_if(machine, machine.registers[ins.x] == machine.registers[ins.y])


def _sne_vx_vy(machine, ins, rng):
    _skip_if(machine, machine.registers[ins.x] != machine.registers[ins.y])


def _skp(machine, ins, rng):
    _skip_if(machine, machine.is_pressed(machine.registers[ins.x]))


def _sknp(machine, ins, rng):
    _skip_if(machine, not machine.is_pressed(machine.registers[ins.x]))


# ---- Immediates ----

def _ld_vx_kk(machine, ins, rng):
    machine.registers[ins.x] = ins.kk


def _add_vx_kk(machine, ins, rng):
    # no carry flag for the immediate form
    machine.registers[ins.x] = (machine.registers[ins.x] + ins.kk) & 0xFF


# ---- 8xyN register-register ALU ----
# VF is written last so that x == 0xF still ends with the flag value.

def _ld_vx_vy(machine, ins, rng):
    machine.registers[ins.x] = machine.registers[ins.y]


def _or(machine, ins, rng):
    machine.registers[ins.x] |= machine.registers[ins.y]


def _and(machine, ins, rng):
    machine.registers[ins.x] &= machine.registers[ins.y]


def _xor(machine, ins, rng):
    machine.registers[ins.x] ^= machine.registers[ins.y]


def _add(machine, ins, rng):
    v = machine.registers
    s = v[ins.x] + v[ins.y]
    v[ins.x] = s & 0xFF
    v[0xF] = 1 if s > 0xFF else 0


def _sub(machine, ins, rng):
    v = machine.registers
    vx, vy = v[ins.x], v[ins.y]
    v[ins.x] = (vx - vy) & 0xFF
    v[0xF] = 1 if vx >= vy else 0


def _shr(machine, ins, rng):
    v = machine.registers
    vx = v[ins.x]
    v[ins.x] = vx >> 1
    v[0xF] = vx & 1


def _subn(machine, ins, rng):
    v = machine.registers
    vx, vy = v[ins.x], v[ins.y]
    v[ins.x] = (vy - vx) & 0xFF
    v[0xF] = 1 if vy >= vx else 0


def _shl(machine, ins, rng):
    v = machine.registers
    vx = v[ins.x]
    v[ins.x] = (vx << 1) & 0xFF
    v[0xF] = (vx >> 7) & 1


# ---- Index register ----

def _ld_i(machine, ins, rng):
    machine.index_register = ins.addr


def _add_i_vx(machine, ins, rng):
    # unmasked; an index past 0xFFF only fails when it is dereferenced
    machine.index_register += machine.registers[ins.x]


def _ld_f_vx(machine, ins, rng):
    machine.index_register = config.font_address + machine.registers[ins.x] * config.font_glyph_size


# ---- Random ----

def _rnd(machine, ins, rng):
    machine.registers[ins.x] = rng.getrandbits(8) & ins.kk


# ---- Dxyn - Draw ----

def _drw(machine, ins, rng):
    w, h = config.width, config.height
    x = machine.registers[ins.x] % w
    y = machine.registers[ins.y] % h
    sprite = machine.read_block(machine.index_register, ins.n)
    buf = machine.framebuffer
    collision = 0
    for row, bits in enumerate(sprite):
        if bits == 0:
            continue
        base = ((y + row) % h) * w
        for col in range(8):
            if bits & (0x80 >> col):
                idx = base + (x + col) % w
                collision |= buf[idx]
                buf[idx] ^= 1
    machine.registers[0xF] = collision
    if collision:
        log("Sprite collision at", (x, y))


# ---- Timers ----

def _ld_vx_dt(machine, ins, rng):
    machine.registers[ins.x] = machine.delay_timer


def _ld_dt_vx(machine, ins, rng):
    machine.delay_timer = machine.registers[ins.x]


def _ld_st_vx(machine, ins, rng):
    machine.sound_timer = machine.registers[ins.x]


# ---- Fx0A - Wait for key ----

def _ld_vx_k(machine, ins, rng):
    pressed = None
    for key, down in enumerate(machine.keypad):
        if down:
            pressed = key
            break
    if pressed is None:
        machine.program_counter -= 2  # stall, the same opcode is fetched next cycle
    else:
        machine.registers[ins.x] = pressed


# ---- Memory ----

def _ld_b_vx(machine, ins, rng):
    val = machine.registers[ins.x]
    machine.load(machine.index_register, (val // 100, (val // 10) % 10, val % 10))


def _ld_i_vx(machine, ins, rng):
    machine.load(machine.index_register, machine.registers[:ins.x + 1])


def _ld_vx_i(machine, ins, rng):
    machine.registers[:ins.x + 1] = machine.read_block(machine.index_register, ins.x + 1)


def _invalid(machine, ins, rng):
    raise InvalidOpcodeError(ins.opcode, machine.program_counter - 2)


# ---- Opcode function map ----
funcmap = {
    Op.CLS: _cls,
    Op.RET: _ret,
    Op.JP: _jp,
    Op.CALL: _call,
    Op.SE_VX_KK: _se_vx_kk,
    Op.SNE_VX_KK: _sne_vx_kk,
    Op.SE_VX_VY: _se_vx_vy,
    Op.LD_VX_KK: _ld_vx_kk,
    Op.ADD_VX_KK: _add_vx_kk,
    Op.LD_VX_VY: _ld_vx_vy,
    Op.OR: _or,
    Op.AND: _and,
    Op.XOR: _xor,
    Op.ADD: _add,
    Op.SUB: _sub,
    Op.SHR: _shr,
    Op.SUBN: _subn,
    Op.SHL: _shl,
    Op.SNE_VX_VY: _sne_vx_vy,
    Op.LD_I: _ld_i,
    Op.JP_V0: _jp_v0,
    Op.RND: _rnd,
    Op.DRW: _drw,
    Op.SKP: _skp,
    Op.SKNP: _sknp,
    Op.LD_VX_DT: _ld_vx_dt,
    Op.LD_VX_K: _ld_vx_k,
    Op.LD_DT_VX: _ld_dt_vx,
    Op.LD_ST_VX: _ld_st_vx,
    Op.ADD_I_VX: _add_i_vx,
    Op.LD_F_VX: _ld_f_vx,
    Op.LD_B_VX: _ld_b_vx,
    Op.LD_I_VX: _ld_i_vx,
    Op.LD_VX_I: _ld_vx_i,
    Op.INVALID: _invalid,
}

_missing = set(Op) - set(funcmap)
if _missing:
    raise ImportError("No handler for %s" % ", ".join(sorted(op.name for op in _missing)))


def execute(machine, ins, rng):
    funcmap[ins.op](machine, ins, rng)
