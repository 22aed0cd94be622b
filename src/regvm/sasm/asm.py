import logging as lg
from typing import Iterable

import pyparsing as pp

import regvm.common.ops as ops
import regvm.common.encoding as enc
import regvm.sasm.grammar as grammar
from regvm.common.hwconf import NUM_REGS


class AsmError(Exception):
    pass


def check_reg(lineno: int, reg: int):
    if not 0 <= reg < NUM_REGS:
        raise AsmError(f'line {lineno}: no register r{reg}')


def issue(op: int, operands: list[int], lineno: int) -> int:
    if op == ops.HLT:
        return enc.encode_halt()

    if op == ops.LDI:
        reg, imm = operands
        check_reg(lineno, reg)

        if not 0 <= imm <= enc.BYTE:
            raise AsmError(f'line {lineno}: immediate {imm} does not fit a byte')

        return enc.encode_loadi(reg, imm)

    if op == ops.ADD:
        for reg in operands:
            check_reg(lineno, reg)

        return enc.encode_add(*operands)

    raise AsmError(f'line {lineno}: unsupported opcode {op}')


def assemble(source: str) -> list[int]:
    try:
        actions = grammar.program.parse_string(source, parse_all=True)
    except pp.ParseException as e:
        raise AsmError(f'line {e.lineno}: {e.msg}') from e

    words = []

    for (op, operands, lineno) in actions:  # type: ignore
        word = issue(op, operands, lineno)
        lg.debug(f'Issuing {enc.format_word(word)} for {ops.MNEMONICS[op]} {operands}')
        words.append(word)

    return words


def disassemble(word: int) -> str:
    return enc.describe(enc.decode(word))


def listing(words: Iterable[int]) -> list[str]:
    return [f'{enc.format_word(w)}  {disassemble(w)}' for w in words]
