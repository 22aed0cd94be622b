''' Instruction word layout

    bits 15-12  opcode
    bits 11-8   op1  (destination register)
    bits  7-4   op2  (source register, or high nibble of imm)
    bits  3-0   op3  (source register, or low nibble of imm)
    bits  7-0   imm
'''

from dataclasses import dataclass

import regvm.common.ops as ops
from regvm.common.hwconf import WORD_MASK, HEX_DIGITS

OPCODE_SHIFT = 12
OP1_SHIFT = 8
OP2_SHIFT = 4

NIBBLE = 0xF
BYTE = 0xFF


@dataclass(frozen=True)
class Instruction:
    opcode: int
    op1: int
    op2: int
    op3: int
    imm: int


def decode(word: int) -> Instruction:
    # Every field is extracted whether or not the opcode needs it
    word &= WORD_MASK

    return Instruction(
        opcode=(word >> OPCODE_SHIFT) & NIBBLE,
        op1=(word >> OP1_SHIFT) & NIBBLE,
        op2=(word >> OP2_SHIFT) & NIBBLE,
        op3=word & NIBBLE,
        imm=word & BYTE
    )


def check_field(name: str, value: int, limit: int):
    if not 0 <= value <= limit:
        raise ValueError(f'{name} {value} does not fit 0..{limit}')


def encode(opcode: int, op1: int = 0, op2: int = 0, op3: int = 0) -> int:
    check_field('opcode', opcode, NIBBLE)
    check_field('op1', op1, NIBBLE)
    check_field('op2', op2, NIBBLE)
    check_field('op3', op3, NIBBLE)

    return (opcode << OPCODE_SHIFT) | (op1 << OP1_SHIFT) | (op2 << OP2_SHIFT) | op3


def encode_halt() -> int:
    return encode(ops.HLT)


def encode_loadi(reg: int, imm: int) -> int:
    check_field('imm', imm, BYTE)
    return encode(ops.LDI, reg, imm >> OP2_SHIFT, imm & NIBBLE)


def encode_add(dst: int, a: int, b: int) -> int:
    return encode(ops.ADD, dst, a, b)


def describe(instr: Instruction) -> str:
    match instr.opcode:
        case ops.HLT:
            return 'halt'
        case ops.LDI:
            return f'loadi r{instr.op1} #{instr.imm}'
        case ops.ADD:
            return f'add r{instr.op1} r{instr.op2} r{instr.op3}'
        case _:
            return ops.UNKNOWN


def format_word(word: int) -> str:
    return f'{word & WORD_MASK:0{HEX_DIGITS}X}'
