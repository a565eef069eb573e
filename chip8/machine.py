import logging
import random

from chip8.constants import (DEFAULT_PROGRAM_ADDRESS, FONT_SPRITE_MEMORY_LOCATION, FONT_SPRITE_SIZE,
                             FONT_SPRITES, INSTRUCTION_SIZE)
from chip8.execute import InstructionExecutor, WaitingOnKeyUp
from chip8.keyboard import Key, Keyboard
from chip8.memory import Memory, Stack
from chip8.registers import DataRegisters
from chip8.screen import Screen

logger = logging.getLogger(__name__)


class Chip8(InstructionExecutor):
    """
    the whole virtual machine

    the host drives it calling cycle() at the instruction rate and update_timers() at 60Hz,
    forwards key events through key_down()/key_up() and renders framebuffer when
    has_content_updated() says so
    """

    def __init__(self, rng=None):
        self.memory = Memory()
        self.data_registers = DataRegisters()
        self.address_register = 0
        self.program_counter = DEFAULT_PROGRAM_ADDRESS
        self.stack = Stack()
        self.screen = Screen()
        self.keyboard = Keyboard()
        self.delay_timer = 0
        self.sound_timer = 0
        self.in_jump = False
        self.blocked = None
        self.random = rng if rng is not None else random.Random()
        self.handlers = self._build_handlers()

    def __str__(self):
        registers = (f"PC_REGISTER:0x{self.program_counter:04x} | IDX_REGISTER:0x{self.address_register:04x}"
                     f" | VARIABLE_REGISTERS:{self.data_registers!r}")
        stack = f"STACK:{self.stack!r}"
        timers = f"DT:{self.delay_timer} | ST:{self.sound_timer}"
        flags = f"BLOCKED:{self.blocked} | {self.keyboard!r}"
        return f"{registers}\n{stack}\n{timers}\n{flags}"

    # ******************** LIFECYCLE
    def reset(self):
        self.data_registers.reset()
        self.address_register = 0
        self.in_jump = False
        self.delay_timer = 0
        self.sound_timer = 0
        self.stack.clear()
        self.program_counter = DEFAULT_PROGRAM_ADDRESS
        self.memory.clear()
        self.screen.clear()
        self.screen.reset_content_updated()
        self.blocked = None

    def _load_font_sprites(self):
        for i, sprite in enumerate(FONT_SPRITES):
            self.memory.write_unrestricted(sprite, FONT_SPRITE_MEMORY_LOCATION + i * FONT_SPRITE_SIZE)

    def load_program_to_address(self, program, address):
        """reset the machine and load program at address, raise WriteError if it touches protected memory or doesn't fit"""
        self.reset()
        self._load_font_sprites()
        self.memory.write_restricted(program, address)
        self.program_counter = address
        logger.info(f"program of {len(program)} bytes loaded at 0x{address:04x}")

    def load_program(self, program):
        self.load_program_to_address(program, DEFAULT_PROGRAM_ADDRESS)

    # ******************** EXECUTION
    def is_blocked(self):
        return self.blocked is not None

    def cycle(self):
        """fetch, decode and execute one instruction, nothing happens while waiting on a key"""
        if self.is_blocked():
            return
        instruction = self.memory.read_instruction(self.program_counter)
        self.execute_instruction(instruction)
        # auto increment only when the instruction didn't move the pc itself
        if not self.in_jump:
            self.program_counter += INSTRUCTION_SIZE
        self.in_jump = False

    def update_timers(self):
        """count both timers down by one, should be called at 60Hz; timers are frozen while blocked"""
        if self.is_blocked():
            return
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def sound_active(self):
        return self.sound_timer > 0

    # ******************** INPUT
    def key_down(self, key):
        self.keyboard.key_down(Key.from_value(key))

    def key_up(self, key):
        key = Key.from_value(key)
        self.keyboard.key_up(key)
        self.handle_key_up_interrupt(key)

    def handle_key_up_interrupt(self, key):
        if isinstance(self.blocked, WaitingOnKeyUp):
            self.data_registers[self.blocked.register] = int(key)
            logger.debug(f"key {int(key):X} released, stored in {self.blocked.register}")
            self.blocked = None

    # ******************** OUTPUT
    @property
    def framebuffer(self):
        return self.screen.framebuffer

    def has_content_updated(self):
        return self.screen.has_content_updated()

    def reset_content_updated(self):
        self.screen.reset_content_updated()
