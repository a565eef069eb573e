from chip8.errors import (AddressInProtectedMemoryArea, AddressOutOfRange, Chip8Error,
                          InstructionExecutionError, InstructionParsingError, InvalidDataRegister,
                          InvalidInstruction, InvalidKey, InvalidMemoryAccess, InvalidReturn,
                          ReadInstructionError, StackOverflow, WriteError, WriteInProtectedMemoryArea,
                          WriteOutOfRange)
from chip8.instruction import Instruction, Op, decode
from chip8.keyboard import Key, KeyState
from chip8.machine import Chip8
from chip8.registers import DataRegister
from chip8.screen import Pixel

__version__ = "0.1.0"
