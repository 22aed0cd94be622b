# type: ignore
''' Assembly grammar: loadi rN #imm, add rD rA rB, halt '''

import pyparsing as pp

import regvm.common.ops as ops


def parse_const(text: str) -> int:
    if text[:2].lower() == '0x':
        return int(text, 16)

    return int(text)


def g_cmd(op, *operands):
    literal = ops.MNEMONICS[op]
    cmd = pp.Keyword(literal)

    for operand in operands:
        cmd = cmd + operand

    return cmd.set_parse_action(lambda s, loc, r: (op, list(r[1:]), pp.lineno(loc, s)))


comment = pp.Suppress(pp.Literal('//') + pp.rest_of_line)

reg_op = pp.Combine(pp.Suppress('r') + pp.Word(pp.nums)).set_parse_action(lambda r: int(r[0]))

hex_const = pp.Regex('0[xX][0-9a-fA-F]+')
dec_const = pp.Regex('[0-9]+')
imm_op = (pp.Suppress('#') + (hex_const | dec_const)).set_parse_action(lambda r: parse_const(r[0]))

hlt_cmd = g_cmd(ops.HLT)
ldi_cmd = g_cmd(ops.LDI, reg_op, imm_op)
add_cmd = g_cmd(ops.ADD, reg_op, reg_op, reg_op)

cmd = hlt_cmd | ldi_cmd | add_cmd

program = pp.ZeroOrMore(cmd)
program.ignore(comment)
