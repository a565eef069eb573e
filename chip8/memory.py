import logging

from chip8.constants import (INSTRUCTION_SIZE, MEMORY_SIZE, SPRITE_WIDTH, STACK_SIZE,
                             UNPROTECTED_MEMORY_START)
from chip8.errors import (AddressInProtectedMemoryArea, AddressOutOfRange, InvalidReturn,
                          StackOverflow, WriteInProtectedMemoryArea, WriteOutOfRange)
from chip8.instruction import decode
from chip8.screen import Pixel

logger = logging.getLogger(__name__)


# ******************** MEMORY SECTION
# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self, size=STACK_SIZE):
        self.addr_list = []
        self.size = size

    def push(self, address):
        if len(self.addr_list) >= self.size:
            raise StackOverflow(address)
        self.addr_list.append(address)

    def pop(self):
        if not self.addr_list:
            raise InvalidReturn()
        return self.addr_list.pop()

    def clear(self):
        self.addr_list.clear()

    def __len__(self):
        return len(self.addr_list)

    def __iter__(self):
        return iter(self.addr_list)

    def __repr__(self):
        return "[" + ", ".join(f"0x{a:04x}" for a in self.addr_list) + "]"


class SpriteView:
    """read-only window over sprite bytes, one byte per row and one bit per pixel (msb is the leftmost)"""

    def __init__(self, data):
        self.data = bytes(data)
        self.width = SPRITE_WIDTH
        self.height = len(self.data)

    def get_pixel(self, x, y):
        return Pixel.from_bit(self.data[y] >> (SPRITE_WIDTH - 1 - x) & 0x1)

    def __iter__(self):
        """yield (x, y, pixel) row by row"""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, self.get_pixel(x, y)


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    def __init__(self, size=MEMORY_SIZE):
        self.raw_data = bytearray(size)

    def __len__(self):
        return len(self.raw_data)

    def __getitem__(self, index):
        return self.raw_data[index]

    def clear(self):
        self.raw_data[:] = bytes(len(self.raw_data))

    def write_unrestricted(self, data, address):
        """write data starting at address, the protected area is writable too"""
        end = address + len(data)
        if address < 0 or end > len(self.raw_data):
            raise WriteOutOfRange(address, end)
        self.raw_data[address:end] = bytes(data)

    def write_restricted(self, data, address):
        """write data starting at address, refuse to touch the protected area"""
        if address < UNPROTECTED_MEMORY_START:
            raise WriteInProtectedMemoryArea(address, address + len(data))
        self.write_unrestricted(data, address)

    def read_instruction(self, address):
        """fetch and decode the instruction word stored at address"""
        if address < UNPROTECTED_MEMORY_START:
            raise AddressInProtectedMemoryArea(address)
        if address + INSTRUCTION_SIZE > len(self.raw_data):
            raise AddressOutOfRange(address)
        return decode(self.raw_data[address:address + INSTRUCTION_SIZE])

    def read_sprite(self, address, byte_count):
        """return a SpriteView over byte_count bytes starting at address, None if they don't fit in memory"""
        if address < 0 or address + byte_count > len(self.raw_data):
            logger.debug(f"sprite at 0x{address:04x} ({byte_count} bytes) is outside of the memory")
            return None
        return SpriteView(self.raw_data[address:address + byte_count])
