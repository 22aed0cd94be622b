import pytest

import regvm.runtime.cpu as cpu
from regvm.common.encoding import decode, encode, encode_add, encode_loadi
from regvm.common.hwconf import REFERENCE_PROGRAM, REG_MASK

from unit_utils import Collector


def make_cpu(words=(0x0000,), strict=False):
    out = Collector()
    return cpu.CPU(cpu.Program(words), strict=strict, out=out), out


def test_decode_fields():
    instr = decode(0x1064)
    assert (instr.opcode, instr.op1, instr.op2, instr.op3, instr.imm) == (1, 0, 6, 4, 0x64)


def test_decode_total():
    for word in range(0x10000):
        instr = decode(word)
        assert instr.opcode == word >> 12
        assert instr.op1 == (word >> 8) & 0xF
        assert instr.imm == (instr.op2 << 4) | instr.op3 == word & 0xFF


def test_decode_is_pure():
    assert decode(0xF123) == decode(0xF123)


def test_fetch_sequential():
    program = cpu.Program(REFERENCE_PROGRAM)
    assert [program.fetch() for _ in range(3)] == list(REFERENCE_PROGRAM[:3])
    assert program.pc == 3


def test_fetch_out_of_bounds():
    program = cpu.Program([0x1001])
    program.fetch()

    with pytest.raises(cpu.ProgramOutOfBounds):
        program.fetch()

    assert program.pc == 1


def test_program_rejects_wide_words():
    with pytest.raises(ValueError):
        cpu.Program([0x10000])


def test_register_file_bounds():
    regs = cpu.RegisterFile()

    with pytest.raises(cpu.InvalidRegister):
        regs.read(4)

    with pytest.raises(cpu.InvalidRegister):
        regs.write(15, 1)


def test_register_wraps_64_bit():
    regs = cpu.RegisterFile()
    regs.write(0, REG_MASK)
    assert regs.read(0) == -1

    regs.write(1, 1 << 63)
    assert regs.read(1) == -(1 << 63)


def test_snapshot_format():
    regs = cpu.RegisterFile()
    regs.write(2, 0x12C)
    assert regs.snapshot() == 'regs = 0000 0000 012C 0000'


def test_loadi_idempotent():
    proc, _ = make_cpu()
    proc.regs.write(1, 7)
    instr = decode(encode_loadi(2, 0xAB))

    for _ in range(2):
        proc.evaluate(instr)
        assert proc.regs.cells == [0, 7, 0xAB, 0]


def test_loadi_ignores_immediate_nibbles_as_registers():
    # op2/op3 are 0xF here but only the immediate is used
    proc, _ = make_cpu()
    proc.evaluate(decode(encode_loadi(0, 0xFF)))
    assert proc.regs.read(0) == 0xFF


@pytest.mark.parametrize('dst, a, b', [
    (2, 0, 1),
    (0, 0, 1),
    (1, 0, 1),
    (3, 3, 3),
])
def test_add_touches_only_destination(dst, a, b):
    proc, _ = make_cpu()
    before = [5, 11, 17, 23]
    proc.regs.cells = list(before)

    proc.evaluate(decode(encode_add(dst, a, b)))

    expected = list(before)
    expected[dst] = before[a] + before[b]
    assert proc.regs.cells == expected


def test_add_invalid_register():
    proc, _ = make_cpu()

    with pytest.raises(cpu.InvalidRegister):
        proc.evaluate(decode(encode(2, 0, 9, 1)))


def test_halt_clears_running():
    proc, out = make_cpu([0x0000])
    proc.exec_next()

    assert not proc.running
    assert out.lines == ['halt']

    with pytest.raises(cpu.MachineHalted):
        proc.exec_next()

    assert proc.program.pc == 1


def test_unknown_opcode_lenient():
    proc, out = make_cpu([0x7123])
    proc.exec_next()

    assert proc.running
    assert proc.regs.cells == [0, 0, 0, 0]
    assert out.lines == ['oops']


def test_unknown_opcode_strict():
    proc, out = make_cpu([0x7123], strict=True)

    with pytest.raises(cpu.InvalidOpcode):
        proc.exec_next()

    assert out.lines == []
