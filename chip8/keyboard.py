from enum import Enum, IntEnum

from chip8.errors import InvalidKey


class Key(IntEnum):
    NUM0 = 0x0
    NUM1 = 0x1
    NUM2 = 0x2
    NUM3 = 0x3
    NUM4 = 0x4
    NUM5 = 0x5
    NUM6 = 0x6
    NUM7 = 0x7
    NUM8 = 0x8
    NUM9 = 0x9
    A = 0xA
    B = 0xB
    C = 0xC
    D = 0xD
    E = 0xE
    F = 0xF

    @classmethod
    def from_value(cls, value):
        """validating conversion of a register value into a key, raise InvalidKey outside 0x0-0xF"""
        try:
            return cls(value)
        except ValueError:
            raise InvalidKey(value) from None

    @classmethod
    def from_char(cls, char):
        """'0'-'9' and 'a'-'f' (any case) map to the key with the same face value"""
        if len(char) != 1 or char.lower() not in "0123456789abcdef":
            raise ValueError(f"{char!r} is not a CHIP-8 key")
        return cls(int(char, 16))


class KeyState(Enum):
    PRESSED = "pressed"
    RELEASED = "released"


class Keyboard:
    def __init__(self):
        self.states = [KeyState.RELEASED] * len(Key)

    def reset(self):
        self.states = [KeyState.RELEASED] * len(Key)

    def key_down(self, key):
        self.states[Key(key).value] = KeyState.PRESSED

    def key_up(self, key):
        self.states[Key(key).value] = KeyState.RELEASED

    def get_key_state(self, key):
        return self.states[Key(key).value]

    def is_pressed(self, key):
        return self.get_key_state(key) is KeyState.PRESSED

    def __repr__(self):
        pressed = [f"{k.value:X}" for k in Key if self.is_pressed(k)]
        return f"Keyboard(pressed=[{', '.join(pressed)}])"
