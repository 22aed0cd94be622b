# Register file
NUM_REGS = 4
REG_BITS = 64               # Registers wrap as 64-bit two's complement
REG_MASK = (1 << REG_BITS) - 1
REG_SIGN = 1 << (REG_BITS - 1)

# Program words
WORD_BITS = 16
WORD_MASK = (1 << WORD_BITS) - 1

# Text rendering of words and registers
HEX_DIGITS = 4

REFERENCE_PROGRAM = (
    0x1064,  # loadi r0 #100
    0x11C8,  # loadi r1 #200
    0x2201,  # add r2 r0 r1
    0x0000   # halt
)
