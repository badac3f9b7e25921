"""Opcode decoding.

``decode`` turns a 16-bit opcode into an ``Instruction``: a single tagged
value naming the operation plus every operand field. It never fails; opcodes
outside the base CHIP-8 set decode to ``Op.INVALID`` and fail when executed.
"""

from collections import namedtuple
from enum import Enum


class Op(Enum):
    CLS = "CLS"                # 00E0 - Clear the display
    RET = "RET"                # 00EE - Return from subroutine
    JP = "JP"                  # 1nnn - Jump to address
    CALL = "CALL"              # 2nnn - Call subroutine
    SE_VX_KK = "SE_VX_KK"      # 3xkk - Skip if Vx == kk
    SNE_VX_KK = "SNE_VX_KK"    # 4xkk - Skip if Vx != kk
    SE_VX_VY = "SE_VX_VY"      # 5xy0 - Skip if Vx == Vy
    LD_VX_KK = "LD_VX_KK"      # 6xkk - Vx = kk
    ADD_VX_KK = "ADD_VX_KK"    # 7xkk - Vx += kk, no carry
    LD_VX_VY = "LD_VX_VY"      # 8xy0
    OR = "OR"                  # 8xy1
    AND = "AND"                # 8xy2
    XOR = "XOR"                # 8xy3
    ADD = "ADD"                # 8xy4 - VF = carry
    SUB = "SUB"                # 8xy5 - VF = NOT borrow
    SHR = "SHR"                # 8xy6 - VF = bit shifted out
    SUBN = "SUBN"              # 8xy7 - VF = NOT borrow
    SHL = "SHL"                # 8xyE - VF = bit shifted out
    SNE_VX_VY = "SNE_VX_VY"    # 9xy0 - Skip if Vx != Vy
    LD_I = "LD_I"              # Annn - I = nnn
    JP_V0 = "JP_V0"            # Bnnn - Jump to nnn + V0
    RND = "RND"                # Cxkk - Vx = random byte & kk
    DRW = "DRW"                # Dxyn - Draw n-row sprite at (Vx, Vy)
    SKP = "SKP"                # Ex9E - Skip if key Vx pressed
    SKNP = "SKNP"              # ExA1 - Skip if key Vx not pressed
    LD_VX_DT = "LD_VX_DT"      # Fx07
    LD_VX_K = "LD_VX_K"        # Fx0A - Wait for a key press
    LD_DT_VX = "LD_DT_VX"      # Fx15
    LD_ST_VX = "LD_ST_VX"      # Fx18
    ADD_I_VX = "ADD_I_VX"      # Fx1E
    LD_F_VX = "LD_F_VX"        # Fx29 - I = font glyph for Vx
    LD_B_VX = "LD_B_VX"        # Fx33 - BCD of Vx at I..I+2
    LD_I_VX = "LD_I_VX"        # Fx55 - Store V0..Vx at I
    LD_VX_I = "LD_VX_I"        # Fx65 - Load V0..Vx from I
    INVALID = "INVALID"


_MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP {addr:#05x}",
    Op.CALL: "CALL {addr:#05x}",
    Op.SE_VX_KK: "SE V{x:X}, {kk:#04x}",
    Op.SNE_VX_KK: "SNE V{x:X}, {kk:#04x}",
    Op.SE_VX_VY: "SE V{x:X}, V{y:X}",
    Op.LD_VX_KK: "LD V{x:X}, {kk:#04x}",
    Op.ADD_VX_KK: "ADD V{x:X}, {kk:#04x}",
    Op.LD_VX_VY: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, {addr:#05x}",
    Op.JP_V0: "JP V0, {addr:#05x}",
    Op.RND: "RND V{x:X}, {kk:#04x}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_I_VX: "LD [I], V{x:X}",
    Op.LD_VX_I: "LD V{x:X}, [I]",
    Op.INVALID: "??? {opcode:04X}",
}


class Instruction(namedtuple("Instruction", "op opcode x y n kk addr")):
    """A decoded opcode. Fields an operation does not use are still filled in."""

    __slots__ = ()

    def mnemonic(self):
        return _MNEMONICS[self.op].format(**self._asdict())

    def __str__(self):
        return "%04X  %s" % (self.opcode, self.mnemonic())


# ---- Decode tables ----
# top nibble -> op, for groups where the nibble alone decides
_BY_PREFIX = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_KK,
    0x4: Op.SNE_VX_KK,
    0x6: Op.LD_VX_KK,
    0x7: Op.ADD_VX_KK,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET,
}

# 8xyN, keyed by the low nibble
_ALU = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# ExKK, keyed by the low byte
_KEYS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

# FxKK, keyed by the low byte
_MISC = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I,
}


def decode(opcode):
    opcode &= 0xFFFF
    prefix = opcode >> 12
    n = opcode & 0x000F
    kk = opcode & 0x00FF

    if prefix in _BY_PREFIX:
        op = _BY_PREFIX[prefix]
    elif prefix == 0x0:
        op = _SYSTEM.get(opcode, Op.INVALID)
    elif prefix == 0x5:
        op = Op.SE_VX_VY if n == 0 else Op.INVALID
    elif prefix == 0x8:
        op = _ALU.get(n, Op.INVALID)
    elif prefix == 0x9:
        op = Op.SNE_VX_VY if n == 0 else Op.INVALID
    elif prefix == 0xE:
        op = _KEYS.get(kk, Op.INVALID)
    else:
        op = _MISC.get(kk, Op.INVALID)

    return Instruction(
        op=op,
        opcode=opcode,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=n,
        kk=kk,
        addr=opcode & 0x0FFF,
    )


def fetch(machine):
    """Read the big-endian opcode at the program counter."""
    pc = machine.program_counter
    return (machine.read_byte(pc) << 8) | machine.read_byte(pc + 1)
