import logging
from collections import namedtuple
from functools import wraps

from chip8.constants import FONT_SPRITE_MEMORY_LOCATION, FONT_SPRITE_SIZE, INSTRUCTION_SIZE
from chip8.errors import InvalidMemoryAccess
from chip8.instruction import Op
from chip8.keyboard import Key
from chip8.registers import FLAG_REGISTER, DataRegister

logger = logging.getLogger(__name__)

# the machine is suspended until the release of a key, whose value goes in register
WaitingOnKeyUp = namedtuple("WaitingOnKeyUp", ["register"])


# ******************** UTILITIES SECTION
def asm(msg):
    """decorator to log the ASM of the instruction being executed"""
    def decorator(fn):
        @wraps(fn)
        def wrapper_fn(self, instruction):
            if logger.isEnabledFor(logging.DEBUG):
                fields = {
                    "mem_addr": self.program_counter,
                    "x": str(instruction.vx),
                    "y": str(instruction.vy),
                    "address": instruction.address,
                    "num": instruction.num,
                }
                logger.debug(f"mem_addr: 0x{self.program_counter:04x}    instruction: " + msg.format(**fields))
            return fn(self, instruction)
        return wrapper_fn
    return decorator


# ******************** CPU SECTION
class InstructionExecutor:
    """
    execution engine mixed into Chip8, every handler mutates the machine state in place
    errors are raised as soon as they are detected and earlier mutations are not rolled back
    """

    def _build_handlers(self):
        return {
            Op.SYS: self._machine_language_subroutine,
            Op.CLS: self._clear_screen,
            Op.RET: self._return,
            Op.JP: self._jump,
            Op.CALL: self._call_addr,
            Op.SE_VX_NUM: self._skip_if_eq,
            Op.SNE_VX_NUM: self._skip_if_not_eq,
            Op.SE_VX_VY: self._skip_if_eq_regs,
            Op.LD_VX_NUM: self._set_vx,
            Op.ADD_VX_NUM: self._add_to_vx,
            Op.LD_VX_VY: self._set_vx_to_vy,
            Op.OR: self._set_vx_or_vy,
            Op.AND: self._set_vx_and_vy,
            Op.XOR: self._set_vx_xor_vy,
            Op.ADD_VX_VY: self._add_vx_vy,
            Op.SUB: self._sub_vx_vy,
            Op.SHR: self._shr,
            Op.SUBN: self._subn_vx_vy,
            Op.SHL: self._shl,
            Op.SNE_VX_VY: self._skip_if_not_eq_regs,
            Op.LD_I: self._set_idx,
            Op.JP_V0: self._jump_plus,
            Op.RND: self._random_byte_and,
            Op.DRW: self._to_screen,
            Op.SKP: self._skip_if_pressed,
            Op.SKNP: self._skip_if_not_pressed,
            Op.LD_VX_DT: self._set_vx_dt,
            Op.LD_VX_K: self._wait_keypress,
            Op.LD_DT_VX: self._set_dt_vx,
            Op.LD_ST_VX: self._set_st,
            Op.ADD_I_VX: self._add_to_idx,
            Op.LD_F_VX: self._select_char,
            Op.LD_B_VX: self._bcd_repr,
            Op.LD_MEM_VX: self._store_vregs,
            Op.LD_VX_MEM: self._load_vregs,
        }

    def execute_instruction(self, instruction):
        self.handlers[instruction.op](instruction)

    def _goto_next_instruction(self):
        self.program_counter += INSTRUCTION_SIZE

    def _key_in(self, register):
        return Key.from_value(self.data_registers[register])

    @asm("SYS 0x{address:03x}")
    def _machine_language_subroutine(self, instruction):
        # only meaningful on the computers CHIP-8 originally ran on, ignored
        pass

    @asm("CLS")
    def _clear_screen(self, instruction):
        self.screen.clear()

    @asm("RET")
    def _return(self, instruction):
        """return from a subroutine"""
        self.program_counter = self.stack.pop()
        self.in_jump = True

    @asm("JP 0x{address:03x}")
    def _jump(self, instruction):
        self.program_counter = instruction.address
        self.in_jump = True

    @asm("CALL 0x{address:03x}")
    def _call_addr(self, instruction):
        self.stack.push(self.program_counter + INSTRUCTION_SIZE)
        self.program_counter = instruction.address
        self.in_jump = True

    @asm("SE {x}, 0x{num:02x}")
    def _skip_if_eq(self, instruction):
        if self.data_registers[instruction.vx] == instruction.num:
            self._goto_next_instruction()

    @asm("SNE {x}, 0x{num:02x}")
    def _skip_if_not_eq(self, instruction):
        if self.data_registers[instruction.vx] != instruction.num:
            self._goto_next_instruction()

    @asm("SE {x}, {y}")
    def _skip_if_eq_regs(self, instruction):
        if self.data_registers[instruction.vx] == self.data_registers[instruction.vy]:
            self._goto_next_instruction()

    @asm("SNE {x}, {y}")
    def _skip_if_not_eq_regs(self, instruction):
        if self.data_registers[instruction.vx] != self.data_registers[instruction.vy]:
            self._goto_next_instruction()

    @asm("LD {x}, 0x{num:02x}")
    def _set_vx(self, instruction):
        """set the value of one of the 16 variable registers, Vx"""
        self.data_registers[instruction.vx] = instruction.num

    @asm("ADD {x}, 0x{num:02x}")
    def _add_to_vx(self, instruction):
        """add kk to Vx, VF reports the carry"""
        total = self.data_registers[instruction.vx] + instruction.num
        self.data_registers[instruction.vx] = total & 0xFF
        self.data_registers[FLAG_REGISTER] = 1 if total > 0xFF else 0

    @asm("LD {x}, {y}")
    def _set_vx_to_vy(self, instruction):
        self.data_registers[instruction.vx] = self.data_registers[instruction.vy]

    @asm("OR {x}, {y}")
    def _set_vx_or_vy(self, instruction):
        regs = self.data_registers
        regs[instruction.vx] = regs[instruction.vx] | regs[instruction.vy]

    @asm("AND {x}, {y}")
    def _set_vx_and_vy(self, instruction):
        regs = self.data_registers
        regs[instruction.vx] = regs[instruction.vx] & regs[instruction.vy]

    @asm("XOR {x}, {y}")
    def _set_vx_xor_vy(self, instruction):
        regs = self.data_registers
        regs[instruction.vx] = regs[instruction.vx] ^ regs[instruction.vy]

    @asm("ADD {x}, {y}")
    def _add_vx_vy(self, instruction):
        """set Vx = Vx + Vy, VF = 1 on carry"""
        regs = self.data_registers
        total = regs[instruction.vx] + regs[instruction.vy]
        regs[instruction.vx] = total & 0xFF     # keep only the lowest 8 bits
        regs[FLAG_REGISTER] = 1 if total > 0xFF else 0

    @asm("SUB {x}, {y}")
    def _sub_vx_vy(self, instruction):
        """set Vx = Vx - Vy, VF = 0 on borrow, 1 otherwise"""
        regs = self.data_registers
        difference = regs[instruction.vx] - regs[instruction.vy]
        regs[instruction.vx] = difference & 0xFF
        regs[FLAG_REGISTER] = 0 if difference < 0 else 1

    @asm("SUBN {x}, {y}")
    def _subn_vx_vy(self, instruction):
        """set Vx = Vy - Vx, VF = 0 on borrow, 1 otherwise"""
        regs = self.data_registers
        difference = regs[instruction.vy] - regs[instruction.vx]
        regs[instruction.vx] = difference & 0xFF
        regs[FLAG_REGISTER] = 0 if difference < 0 else 1

    @asm("SHR {x}, {y}")
    def _shr(self, instruction):
        """VF = lsb of Vy, then Vx = Vy >> 1"""
        regs = self.data_registers
        source = regs[instruction.vy]
        regs[FLAG_REGISTER] = source & 0x1
        regs[instruction.vx] = source >> 1

    @asm("SHL {x}, {y}")
    def _shl(self, instruction):
        """VF = msb of Vy, then Vx = Vy << 1"""
        regs = self.data_registers
        source = regs[instruction.vy]
        regs[FLAG_REGISTER] = (source & 0x80) >> 7
        regs[instruction.vx] = (source << 1) & 0xFF

    @asm("LD I, 0x{address:03x}")
    def _set_idx(self, instruction):
        self.address_register = instruction.address

    @asm("JP V0, 0x{address:03x}")
    def _jump_plus(self, instruction):
        self.program_counter = instruction.address + self.data_registers[DataRegister.V0]
        self.in_jump = True

    @asm("RND {x}, 0x{num:02x}")
    def _random_byte_and(self, instruction):
        self.data_registers[instruction.vx] = self.random.randint(0, 0xFF) & instruction.num

    @asm("DRW {x}, {y}, {num}")
    def _to_screen(self, instruction):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        sprite = self.memory.read_sprite(self.address_register, instruction.num)
        if sprite is None:
            raise InvalidMemoryAccess(self.address_register + instruction.num)
        x = self.data_registers[instruction.vx]
        y = self.data_registers[instruction.vy]
        erased = False
        # sprites are XORed onto the screen, if this causes any pixel to be erased VF=1
        for col, row, pixel in sprite:
            if self.screen.xor_pixel_wrapped_position(x + col, y + row, pixel):
                erased = True
        self.data_registers[FLAG_REGISTER] = 1 if erased else 0

    @asm("SKP {x}")
    def _skip_if_pressed(self, instruction):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        if self.keyboard.is_pressed(self._key_in(instruction.vx)):
            self._goto_next_instruction()

    @asm("SKNP {x}")
    def _skip_if_not_pressed(self, instruction):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        if not self.keyboard.is_pressed(self._key_in(instruction.vx)):
            self._goto_next_instruction()

    @asm("LD {x}, DT")
    def _set_vx_dt(self, instruction):
        self.data_registers[instruction.vx] = self.delay_timer

    @asm("LD {x}, K")
    def _wait_keypress(self, instruction):
        """suspend the machine until a key is released, the key value goes in Vx"""
        self.blocked = WaitingOnKeyUp(instruction.vx)

    @asm("LD DT, {x}")
    def _set_dt_vx(self, instruction):
        self.delay_timer = self.data_registers[instruction.vx]

    @asm("LD ST, {x}")
    def _set_st(self, instruction):
        self.sound_timer = self.data_registers[instruction.vx]

    @asm("ADD I, {x}")
    def _add_to_idx(self, instruction):
        self.address_register += self.data_registers[instruction.vx]

    @asm("LD F, {x}")
    def _select_char(self, instruction):
        """set I to location of sprite for digit Vx"""
        self.address_register = (FONT_SPRITE_MEMORY_LOCATION
                                 + self.data_registers[instruction.vx] * FONT_SPRITE_SIZE)

    @asm("LD B, {x}")
    def _bcd_repr(self, instruction):
        """store the hundreds digit of Vx at I, the tens digit at I+1, the ones digit at I+2"""
        value = self.data_registers[instruction.vx]
        last = self.address_register + 2
        if last >= len(self.memory):
            raise InvalidMemoryAccess(last)
        self.memory.raw_data[self.address_register:last + 1] = bytes((value // 100, value // 10 % 10, value % 10))

    @asm("LD [I], {x}")
    def _store_vregs(self, instruction):
        """store registers V0 through Vx (included) in memory starting at location I"""
        for register in range(instruction.vx + 1):
            address = self.address_register + register
            if address >= len(self.memory):
                raise InvalidMemoryAccess(address)
            self.memory.raw_data[address] = self.data_registers[DataRegister(register)]

    @asm("LD {x}, [I]")
    def _load_vregs(self, instruction):
        """read registers V0 through Vx (included) from memory starting at location I"""
        for register in range(instruction.vx + 1):
            address = self.address_register + register
            if address >= len(self.memory):
                raise InvalidMemoryAccess(address)
            self.data_registers[DataRegister(register)] = self.memory[address]
