from enum import Enum

from chip8.constants import SCREEN_HEIGHT, SCREEN_WIDTH


class Pixel(Enum):
    ON = 1
    OFF = 0

    def __xor__(self, other):
        if not isinstance(other, Pixel):
            return NotImplemented
        return Pixel.ON if self is not other else Pixel.OFF

    def __bool__(self):
        return self is Pixel.ON

    @staticmethod
    def from_bit(bit):
        return Pixel.ON if bit else Pixel.OFF


class Screen:
    """
    monochrome framebuffer, every pixel starts OFF
    sprites are composed onto it exclusively through xor_pixel_wrapped_position
    """

    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.width, self.height = w, h
        self.framebuffer = [[Pixel.OFF] * w for _ in range(h)]
        self.content_updated = False

    def clear(self):
        """turn every pixel OFF"""
        self.framebuffer = [[Pixel.OFF] * self.width for _ in range(self.height)]
        self.content_updated = True

    def get_pixel(self, x, y):
        return self.framebuffer[y % self.height][x % self.width]

    def xor_pixel_wrapped_position(self, x, y, pixel):
        """
        XOR pixel onto the screen at (x, y), both coordinates wrap around the screen edges
        return True if the composition erased the pixel (it was ON and now is OFF)
        """
        row = self.framebuffer[y % self.height]
        x = x % self.width
        old_value = row[x]
        new_value = old_value ^ pixel
        row[x] = new_value
        self.content_updated = True
        return old_value is Pixel.ON and new_value is Pixel.OFF

    def has_content_updated(self):
        return self.content_updated

    def reset_content_updated(self):
        self.content_updated = False

    def __str__(self):
        return "\n".join("".join("#" if p is Pixel.ON else "." for p in row) for row in self.framebuffer)
