from collections import namedtuple
from enum import Enum

from chip8.errors import InvalidInstruction
from chip8.registers import DataRegister


class Op(Enum):
    """every instruction shape of the base CHIP-8 instruction set"""
    SYS = "0nnn"        # execute machine language subroutine, ignored
    CLS = "00E0"
    RET = "00EE"
    JP = "1nnn"
    CALL = "2nnn"
    SE_VX_NUM = "3xkk"
    SNE_VX_NUM = "4xkk"
    SE_VX_VY = "5xy0"
    LD_VX_NUM = "6xkk"
    ADD_VX_NUM = "7xkk"
    LD_VX_VY = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_VX_VY = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_VX_VY = "9xy0"
    LD_I = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxkk"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I_VX = "Fx1E"
    LD_F_VX = "Fx29"
    LD_B_VX = "Fx33"
    LD_MEM_VX = "Fx55"
    LD_VX_MEM = "Fx65"


# opcode is the raw 16 bit word, num holds either the 8 bit immediate (kk) or the sprite byte count (n)
Instruction = namedtuple("Instruction", ["op", "opcode", "address", "vx", "vy", "num"],
                         defaults=[None, None, None, None])


# ******************** FIELD EXTRACTION
def nibbles(opcode):
    """split a 16 bit opcode in its four 4 bit fields, most significant first"""
    return ((opcode & 0xF000) >> 12, (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4, opcode & 0x000F)


def _address(opcode):
    return {"address": opcode & 0x0FFF}


def _vx(opcode):
    return {"vx": DataRegister.from_nibble((opcode & 0x0F00) >> 8)}


def _vx_vy(opcode):
    return {"vx": DataRegister.from_nibble((opcode & 0x0F00) >> 8),
            "vy": DataRegister.from_nibble((opcode & 0x00F0) >> 4)}


def _vx_kk(opcode):
    return {"vx": DataRegister.from_nibble((opcode & 0x0F00) >> 8), "num": opcode & 0x00FF}


def _vx_vy_n(opcode):
    fields = _vx_vy(opcode)
    fields["num"] = opcode & 0x000F
    return fields


def _no_fields(opcode):
    return {}


# ******************** DECODING TABLE
# WATCH OUT: entries order is important!!!
# the first entry whose (opcode & mask) == pattern wins, so the exact
# 00E0/00EE words have to come before the 0nnn catch-all
DECODING_TABLE = [
    (0xFFFF, 0x00E0, Op.CLS, _no_fields),
    (0xFFFF, 0x00EE, Op.RET, _no_fields),
    (0xF000, 0x0000, Op.SYS, _address),
    (0xF000, 0x1000, Op.JP, _address),
    (0xF000, 0x2000, Op.CALL, _address),
    (0xF000, 0x3000, Op.SE_VX_NUM, _vx_kk),
    (0xF000, 0x4000, Op.SNE_VX_NUM, _vx_kk),
    (0xF00F, 0x5000, Op.SE_VX_VY, _vx_vy),
    (0xF000, 0x6000, Op.LD_VX_NUM, _vx_kk),
    (0xF000, 0x7000, Op.ADD_VX_NUM, _vx_kk),
    (0xF00F, 0x8000, Op.LD_VX_VY, _vx_vy),
    (0xF00F, 0x8001, Op.OR, _vx_vy),
    (0xF00F, 0x8002, Op.AND, _vx_vy),
    (0xF00F, 0x8003, Op.XOR, _vx_vy),
    (0xF00F, 0x8004, Op.ADD_VX_VY, _vx_vy),
    (0xF00F, 0x8005, Op.SUB, _vx_vy),
    (0xF00F, 0x8006, Op.SHR, _vx_vy),
    (0xF00F, 0x8007, Op.SUBN, _vx_vy),
    (0xF00F, 0x800E, Op.SHL, _vx_vy),
    (0xF00F, 0x9000, Op.SNE_VX_VY, _vx_vy),
    (0xF000, 0xA000, Op.LD_I, _address),
    (0xF000, 0xB000, Op.JP_V0, _address),
    (0xF000, 0xC000, Op.RND, _vx_kk),
    (0xF000, 0xD000, Op.DRW, _vx_vy_n),
    (0xF0FF, 0xE09E, Op.SKP, _vx),
    (0xF0FF, 0xE0A1, Op.SKNP, _vx),
    (0xF0FF, 0xF007, Op.LD_VX_DT, _vx),
    (0xF0FF, 0xF00A, Op.LD_VX_K, _vx),
    (0xF0FF, 0xF015, Op.LD_DT_VX, _vx),
    (0xF0FF, 0xF018, Op.LD_ST_VX, _vx),
    (0xF0FF, 0xF01E, Op.ADD_I_VX, _vx),
    (0xF0FF, 0xF029, Op.LD_F_VX, _vx),
    (0xF0FF, 0xF033, Op.LD_B_VX, _vx),
    (0xF0FF, 0xF055, Op.LD_MEM_VX, _vx),
    (0xF0FF, 0xF065, Op.LD_VX_MEM, _vx),
]


def decode(word):
    """
    decode a big endian instruction word (2 bytes or a 16 bit int) into an Instruction
    raise InvalidInstruction if no entry of the decoding table matches
    """
    if isinstance(word, (bytes, bytearray, memoryview)):
        if len(word) != 2:
            raise ValueError(f"an instruction word is 2 bytes long, got {len(word)}")
        opcode = word[0] << 8 | word[1]
    elif 0 <= word <= 0xFFFF:
        opcode = word
    else:
        raise ValueError(f"0x{word:x} is not a 16 bit instruction word")
    for mask, pattern, op, fields in DECODING_TABLE:
        if opcode & mask == pattern:
            return Instruction(op, opcode, **fields(opcode))
    raise InvalidInstruction(opcode)
