from enum import IntEnum

from chip8.errors import InvalidDataRegister


class DataRegister(IntEnum):
    V0 = 0x0
    V1 = 0x1
    V2 = 0x2
    V3 = 0x3
    V4 = 0x4
    V5 = 0x5
    V6 = 0x6
    V7 = 0x7
    V8 = 0x8
    V9 = 0x9
    VA = 0xA
    VB = 0xB
    VC = 0xC
    VD = 0xD
    VE = 0xE
    VF = 0xF    # flag register, overwritten by carry/borrow/shift/collision

    @classmethod
    def from_nibble(cls, value):
        """validating conversion of a 4 bit field into a register identifier"""
        try:
            return cls(value)
        except ValueError:
            raise InvalidDataRegister(value) from None

    def __str__(self):
        return f"V{self.value:X}"


FLAG_REGISTER = DataRegister.VF


class DataRegisters:
    """the 16 8-bit general purpose registers V0..VF"""

    def __init__(self):
        self.data = [0] * len(DataRegister)

    def reset(self):
        self.data = [0] * len(DataRegister)

    def __getitem__(self, register: DataRegister) -> int:
        return self.data[DataRegister(register).value]

    def __setitem__(self, register: DataRegister, value: int):
        if not 0 <= value <= 0xFF:
            raise ValueError(f"{value} does not fit into the 8 bit register {DataRegister(register)}")
        self.data[DataRegister(register).value] = value

    def __iter__(self):
        return iter(self.data)

    def __len__(self):
        return len(self.data)

    def __repr__(self):
        return " ".join(f"{DataRegister(i)}:{v:02x}" for i, v in enumerate(self.data))
