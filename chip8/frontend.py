import argparse
import logging
import random
import sys

import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_0, K_1, K_2, K_3,
    K_4, K_5, K_6, K_7,
    K_8, K_9, K_a, K_b,
    K_c, K_d, K_e, K_f,
)

from chip8.errors import Chip8Error
from chip8.keyboard import Key
from chip8.machine import Chip8
from chip8.screen import Pixel

logger = logging.getLogger(__name__)


# ******************** STATIC SECTION
KEY_MAPPINGS = {
    K_0: Key.NUM0,
    K_1: Key.NUM1,
    K_2: Key.NUM2,
    K_3: Key.NUM3,
    K_4: Key.NUM4,
    K_5: Key.NUM5,
    K_6: Key.NUM6,
    K_7: Key.NUM7,
    K_8: Key.NUM8,
    K_9: Key.NUM9,
    K_a: Key.A,
    K_b: Key.B,
    K_c: Key.C,
    K_d: Key.D,
    K_e: Key.E,
    K_f: Key.F,
}

DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False
TIMER_HZ = 60
CPU_HZ = 500
SCALE = 15
BLUE = pygame.Color(80,69,155,255)
LIGHT_BLUE = pygame.Color(136,126,203,255)


# ******************** UTILITIES SECTION
def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--cpu-hz", type=int, default=CPU_HZ, help="instructions executed per second")
    parser.add_argument("--scale", type=int, default=SCALE, help="size in pixels of a CHIP-8 pixel")
    parser.add_argument("--seed", type=int, default=None, help="seed for the RND instruction")
    parser.add_argument("--debug", action="store_true", default=DEBUG, help="log every executed instruction")
    return parser.parse_args(argv)


def load_rom(path):
    """read the ROM file at path, it's loaded verbatim so no validation happens here"""
    with open(path, mode='rb') as f:
        return f.read()


# ******************** I/O SECTION
class Display:
    """renders the machine framebuffer on a pygame window"""

    def __init__(self, machine, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE):
        self.machine = machine
        self.scale = s
        self.background = bg_color
        self.foreground = fg_color
        self.surface = pygame.display.set_mode(
            (machine.screen.width * self.scale, machine.screen.height * self.scale),
        )
        self.surface.fill(self.background)

    def refresh(self):
        """redraw the window only if the framebuffer changed since the last refresh"""
        if not self.machine.has_content_updated():
            return
        self.surface.fill(self.background)
        for y, row in enumerate(self.machine.framebuffer):
            for x, pixel in enumerate(row):
                if pixel is Pixel.ON:
                    pygame.draw.rect(
                        self.surface,
                        self.foreground,
                        (x * self.scale, y * self.scale, self.scale, self.scale)
                    )
        pygame.display.flip()
        self.machine.reset_content_updated()


def handle_events(machine):
    """forward keypad events to the machine, return False when the user asked to quit"""
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key in KEY_MAPPINGS:
                machine.key_down(KEY_MAPPINGS[event.key])
        elif event.type == pygame.KEYUP and event.key in KEY_MAPPINGS:
            machine.key_up(KEY_MAPPINGS[event.key])
    return True


# ******************** ENTRY POINT SECTION
def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    # pygame initialization
    pygame.init()
    clock = pygame.time.Clock()
    pygame.display.set_caption(os.path.basename(args.file))
    # CPU
    chip = Chip8(random.Random(args.seed))
    chip.load_program(load_rom(args.file))
    display = Display(chip, s=args.scale)
    # the loop runs at TIMER_HZ, executing enough instructions per frame to reach cpu_hz
    cycles_per_frame = max(1, args.cpu_hz // TIMER_HZ)
    run = True
    try:
        while run:
            clock.tick(TIMER_HZ)
            run = handle_events(chip)
            for _ in range(cycles_per_frame):
                if chip.is_blocked():
                    break
                chip.cycle()        # emulate one machine cycle (fetch opcode, decode opcode, execute opcode)
            chip.update_timers()
            display.refresh()
    except Chip8Error as e:
        logger.error(e)
        sys.exit(f"********** THE EMULATOR CRASHED WITH THE FOLLOWING STATE\n{chip}")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
