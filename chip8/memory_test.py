import unittest

from chip8.constants import MEMORY_SIZE, STACK_SIZE, UNPROTECTED_MEMORY_START
from chip8.errors import (AddressInProtectedMemoryArea, AddressOutOfRange, InvalidInstruction,
                          InvalidReturn, StackOverflow, WriteInProtectedMemoryArea, WriteOutOfRange)
from chip8.instruction import Op
from chip8.memory import Memory, Stack
from chip8.screen import Pixel


class TestStack(unittest.TestCase):
    def test_lifo(self):
        stack = Stack()
        stack.push(0x202)
        stack.push(0x304)
        self.assertEqual(stack.pop(), 0x304)
        self.assertEqual(stack.pop(), 0x202)

    def test_pop_on_empty_stack(self):
        with self.assertRaises(InvalidReturn):
            Stack().pop()

    def test_overflow(self):
        stack = Stack()
        for i in range(STACK_SIZE):
            stack.push(0x200 + 2 * i)
        with self.assertRaises(StackOverflow):
            stack.push(0x400)
        self.assertEqual(len(stack), STACK_SIZE)

    def test_clear(self):
        stack = Stack()
        stack.push(0x200)
        stack.clear()
        self.assertEqual(len(stack), 0)


class TestMemoryWrites(unittest.TestCase):
    def test_starts_zeroed(self):
        memory = Memory()
        self.assertEqual(len(memory), MEMORY_SIZE)
        self.assertEqual(memory.raw_data, bytearray(MEMORY_SIZE))

    def test_unrestricted_write_reaches_protected_area(self):
        memory = Memory()
        memory.write_unrestricted([0xF0, 0x90], 0)
        self.assertEqual(memory[0], 0xF0)
        self.assertEqual(memory[1], 0x90)

    def test_restricted_write(self):
        memory = Memory()
        memory.write_restricted(b"\x12\x34", UNPROTECTED_MEMORY_START)
        self.assertEqual(memory[UNPROTECTED_MEMORY_START:UNPROTECTED_MEMORY_START + 2], b"\x12\x34")

    def test_restricted_write_in_protected_area_leaves_memory_untouched(self):
        memory = Memory()
        with self.assertRaises(WriteInProtectedMemoryArea) as ctx:
            memory.write_restricted(b"\xAA" * 4, UNPROTECTED_MEMORY_START - 2)
        self.assertEqual(ctx.exception.start, UNPROTECTED_MEMORY_START - 2)
        self.assertEqual(ctx.exception.end, UNPROTECTED_MEMORY_START + 2)
        self.assertEqual(memory.raw_data, bytearray(MEMORY_SIZE))

    def test_write_out_of_range(self):
        memory = Memory()
        with self.assertRaises(WriteOutOfRange):
            memory.write_restricted(b"\x01\x02", MEMORY_SIZE - 1)
        with self.assertRaises(WriteOutOfRange):
            memory.write_unrestricted(b"\x01", MEMORY_SIZE)
        self.assertEqual(memory.raw_data, bytearray(MEMORY_SIZE))

    def test_write_up_to_the_last_byte(self):
        memory = Memory()
        memory.write_restricted(b"\x01\x02", MEMORY_SIZE - 2)
        self.assertEqual(memory[MEMORY_SIZE - 1], 0x02)

    def test_clear(self):
        memory = Memory()
        memory.write_unrestricted(b"\xFF" * 16, 0x300)
        memory.clear()
        self.assertEqual(memory.raw_data, bytearray(MEMORY_SIZE))


class TestMemoryReads(unittest.TestCase):
    def test_read_instruction(self):
        memory = Memory()
        memory.write_restricted(b"\x6A\x2B", 0x200)
        instruction = memory.read_instruction(0x200)
        self.assertIs(instruction.op, Op.LD_VX_NUM)
        self.assertEqual(instruction.num, 0x2B)

    def test_read_instruction_in_protected_area(self):
        with self.assertRaises(AddressInProtectedMemoryArea) as ctx:
            Memory().read_instruction(0x1FE)
        self.assertEqual(ctx.exception.address, 0x1FE)

    def test_read_instruction_out_of_range(self):
        with self.assertRaises(AddressOutOfRange):
            Memory().read_instruction(MEMORY_SIZE - 1)
        with self.assertRaises(AddressOutOfRange):
            Memory().read_instruction(MEMORY_SIZE)

    def test_read_instruction_propagates_decode_errors(self):
        memory = Memory()
        memory.write_restricted(b"\x50\x01", 0x200)
        with self.assertRaises(InvalidInstruction):
            memory.read_instruction(0x200)

    def test_read_sprite(self):
        memory = Memory()
        memory.write_restricted(b"\x80\x01", 0x300)
        sprite = memory.read_sprite(0x300, 2)
        self.assertEqual((sprite.width, sprite.height), (8, 2))
        self.assertIs(sprite.get_pixel(0, 0), Pixel.ON)
        self.assertIs(sprite.get_pixel(1, 0), Pixel.OFF)
        self.assertIs(sprite.get_pixel(7, 1), Pixel.ON)
        self.assertEqual(sum(1 for _, _, p in sprite if p is Pixel.ON), 2)

    def test_read_empty_sprite(self):
        sprite = Memory().read_sprite(0x300, 0)
        self.assertEqual(sprite.height, 0)
        self.assertEqual(list(sprite), [])

    def test_read_sprite_out_of_range(self):
        memory = Memory()
        self.assertIsNone(memory.read_sprite(MEMORY_SIZE - 2, 3))
        self.assertIsNotNone(memory.read_sprite(MEMORY_SIZE - 3, 3))


if __name__ == "__main__":
    unittest.main()
