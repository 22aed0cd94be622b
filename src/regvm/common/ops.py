HLT = 0x0    # stop the machine
LDI = 0x1    # IMM -> R1
ADD = 0x2    # R2 + R3 -> R1

MNEMONICS = {
    HLT: 'halt',
    LDI: 'loadi',
    ADD: 'add'
}

OPCODES = {v: k for k, v in MNEMONICS.items()}

# Trace text for anything outside the instruction set
UNKNOWN = 'oops'
