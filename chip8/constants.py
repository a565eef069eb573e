# ******************** MACHINE LAYOUT
MEMORY_SIZE = 4096
UNPROTECTED_MEMORY_START = 0x200     # everything below is reserved for the interpreter (fonts)
DEFAULT_PROGRAM_ADDRESS = 0x200
INSTRUCTION_SIZE = 2
STACK_SIZE = 16

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SPRITE_WIDTH = 8                     # each sprite byte is one row of 8 pixels


# ******************** FONTS
FONT_SPRITE_MEMORY_LOCATION = 0x000
FONT_SPRITE_SIZE = 5
FONT_SPRITES = [
    [0xF0, 0x90, 0x90, 0x90, 0xF0],  # 0
    [0x20, 0x60, 0x20, 0x20, 0x70],  # 1
    [0xF0, 0x10, 0xF0, 0x80, 0xF0],  # 2
    [0xF0, 0x10, 0xF0, 0x10, 0xF0],  # 3
    [0x90, 0x90, 0xF0, 0x10, 0x10],  # 4
    [0xF0, 0x80, 0xF0, 0x10, 0xF0],  # 5
    [0xF0, 0x80, 0xF0, 0x90, 0xF0],  # 6
    [0xF0, 0x10, 0x20, 0x40, 0x40],  # 7
    [0xF0, 0x90, 0xF0, 0x90, 0xF0],  # 8
    [0xF0, 0x90, 0xF0, 0x10, 0xF0],  # 9
    [0xF0, 0x90, 0xF0, 0x90, 0x90],  # A
    [0xE0, 0x90, 0xE0, 0x90, 0xE0],  # B
    [0xF0, 0x80, 0x80, 0x80, 0xF0],  # C
    [0xE0, 0x90, 0x90, 0x90, 0xE0],  # D
    [0xF0, 0x80, 0xF0, 0x80, 0xF0],  # E
    [0xF0, 0x80, 0xF0, 0x80, 0x80],  # F
]
