import logging as lg
from typing import Callable, Sequence

import regvm.common.ops as ops
from regvm.common.encoding import Instruction, decode, describe
from regvm.common.hwconf import NUM_REGS, REG_MASK, REG_SIGN, WORD_MASK, HEX_DIGITS


Output = Callable[[str], None]


class VMError(Exception):
    pass


class ProgramOutOfBounds(VMError):
    pass


class InvalidRegister(VMError):
    pass


class InvalidOpcode(VMError):
    pass


class MachineHalted(VMError):
    pass


def wrap(value: int) -> int:
    value &= REG_MASK
    return value - (REG_MASK + 1) if value & REG_SIGN else value


class RegisterFile():
    cells: list[int]

    def __init__(self, size: int = NUM_REGS):
        self.cells = [0] * size

    def __len__(self) -> int:
        return len(self.cells)

    def check(self, index: int):
        if not 0 <= index < len(self.cells):
            raise InvalidRegister(f'r{index} is not one of r0..r{len(self.cells) - 1}')

    def read(self, index: int) -> int:
        self.check(index)
        return self.cells[index]

    def write(self, index: int, value: int):
        self.check(index)
        self.cells[index] = wrap(value)

    def snapshot(self) -> str:
        return 'regs = ' + ' '.join(f'{v & REG_MASK:0{HEX_DIGITS}X}' for v in self.cells)


class Program():
    ''' Read-only instruction store with its program counter '''

    words: tuple[int, ...]
    pc: int

    def __init__(self, words: Sequence[int]):
        for addr, word in enumerate(words):
            if not 0 <= word <= WORD_MASK:
                raise ValueError(f'Word {word:#x} at {addr} is not 16-bit')

        self.words = tuple(words)
        self.pc = 0

    def __len__(self) -> int:
        return len(self.words)

    def fetch(self) -> int:
        if self.pc >= len(self.words):
            raise ProgramOutOfBounds(f'PC {self.pc} past the end of a {len(self.words)}-word program')

        word = self.words[self.pc]
        self.pc += 1
        return word


class CPU():
    regs: RegisterFile
    program: Program
    running: bool
    strict: bool    # Unknown opcodes raise instead of tracing 'oops'

    def __init__(self, program: Program, strict: bool = False, out: Output = print):
        self.program = program
        self.strict = strict
        self.out = out

        self.regs = RegisterFile()
        self.running = True

    # - Helpers - #

    def debug_dump(self):
        state = [f'PC:{self.program.pc}']
        state.extend([f'{i}:{v:X}' for i, v in enumerate(self.regs.cells)])
        lg.debug(' '.join(state))

    def show_regs(self):
        self.out(self.regs.snapshot())

    # - Operations - #

    def hlt(self, instr: Instruction):
        self.running = False

    def ldi(self, instr: Instruction):
        self.regs.write(instr.op1, instr.imm)

    def add(self, instr: Instruction):
        a = self.regs.read(instr.op2)
        b = self.regs.read(instr.op3)
        self.regs.write(instr.op1, a + b)

    def unknown(self, instr: Instruction):
        if self.strict:
            raise InvalidOpcode(f'Opcode {instr.opcode:X} at PC {self.program.pc - 1}')

        lg.warning(f'Ignoring unknown opcode {instr.opcode:X} at PC {self.program.pc - 1}')
        self.out(describe(instr))

    HANDLERS = {
        ops.HLT: hlt,
        ops.LDI: ldi,
        ops.ADD: add
    }

    # -- Implementation -- #

    def evaluate(self, instr: Instruction):
        handler = self.HANDLERS.get(instr.opcode)

        if handler is None:
            self.unknown(instr)
            return

        self.out(describe(instr))
        handler(self, instr)

    def exec_next(self):
        if not self.running:
            raise MachineHalted('Machine is halted')

        word = self.program.fetch()
        self.evaluate(decode(word))
        self.debug_dump()
