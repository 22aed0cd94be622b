import sys
import logging as lg
import traceback
from typing import Sequence

import click

from regvm.common.hwconf import REFERENCE_PROGRAM, WORD_MASK
import regvm.runtime.cpu as cpu


EXIT_HALT = 0
EXIT_FAULT = 2
EXIT_KEYBOARD = 3
EXIT_USAGE = 64
EXIT_EXEC_ERROR = 100


def execute(words: Sequence[int], strict: bool = False, out: cpu.Output = print) -> cpu.CPU:
    proc = cpu.CPU(cpu.Program(words), strict=strict, out=out)
    proc.show_regs()

    while proc.running:
        proc.exec_next()
        proc.show_regs()

    return proc


def parse_word(text: str) -> int:
    word = int(text, 16)

    if not 0 <= word <= WORD_MASK:
        raise ValueError(f'{text} is not a 16-bit word')

    return word


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--strict', is_flag=True, help='Fail on unknown opcodes instead of skipping them')
@click.argument('words', nargs=-1)
def run(verbose: bool, strict: bool, words: tuple[str, ...]):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info("REGVM")

    try:
        program = [parse_word(w) for w in words] if words else list(REFERENCE_PROGRAM)
    except ValueError as e:
        lg.error(f'Bad program word: {e}')
        sys.exit(EXIT_USAGE)

    try:
        execute(program, strict=strict)
        lg.info('Execution halted gracefully')
        sys.exit(EXIT_HALT)

    except cpu.VMError as e:
        lg.error(f'Execution halted on {type(e).__name__}: {e}')
        sys.exit(EXIT_FAULT)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)

    except Exception as e:
        lg.info(f'Execution halted on general error {e}')
        traceback.print_exc()
        sys.exit(EXIT_EXEC_ERROR)


if __name__ == '__main__':
    run()
