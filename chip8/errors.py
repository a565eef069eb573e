class Chip8Error(Exception):
    """base class of every error raised by the interpreter core"""


# ******************** DECODING
class InstructionParsingError(Chip8Error):
    pass


class InvalidInstruction(InstructionParsingError):
    def __init__(self, opcode):
        self.opcode = opcode
        super().__init__(f"invalid instruction '0x{opcode:04x}'")


class InvalidDataRegister(InstructionParsingError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"invalid data register '{value!r}'")


# ******************** FETCHING
class ReadInstructionError(Chip8Error):
    def __init__(self, address, reason):
        self.address = address
        super().__init__(f"{reason}: 0x{address:04x}")


class AddressInProtectedMemoryArea(ReadInstructionError):
    def __init__(self, address):
        super().__init__(address, "instruction address in protected memory area")


class AddressOutOfRange(ReadInstructionError):
    def __init__(self, address):
        super().__init__(address, "instruction address outside of the memory")


# ******************** EXECUTION
class InstructionExecutionError(Chip8Error):
    pass


class InvalidReturn(InstructionExecutionError):
    def __init__(self):
        super().__init__("invalid return, no address on stack to jump back to")


class StackOverflow(InstructionExecutionError):
    def __init__(self, address):
        self.address = address
        super().__init__(f"the CHIP-8 stack is full, cannot push 0x{address:04x}")


class InvalidMemoryAccess(InstructionExecutionError):
    def __init__(self, address):
        self.address = address
        super().__init__(f"invalid memory access, attempted to access 0x{address:04x}")


class InvalidKey(InstructionExecutionError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"invalid key {value!r} specified")


# ******************** LOADING
class WriteError(Chip8Error):
    def __init__(self, start, end, reason):
        self.start, self.end = start, end
        super().__init__(f"{reason}: 0x{start:04x}..0x{end:04x}")


class WriteInProtectedMemoryArea(WriteError):
    def __init__(self, start, end):
        super().__init__(start, end, "address range is inside of protected memory area")


class WriteOutOfRange(WriteError):
    def __init__(self, start, end):
        super().__init__(start, end, "address range is outside of the memory")
