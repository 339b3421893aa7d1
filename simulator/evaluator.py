from dataclasses import dataclass

import numpy as np

from simulator.kernel import HALTED, STEP_LIMIT, TAPE_OVERFLOW, simulate_batch
from simulator.operands import multiplication_tape, validate_operands
from simulator.result import extract_result
from simulator.symbols import TapeSymbol
from simulator.turing_machine import START_HEAD

SYMBOLS = list(TapeSymbol)
SYMBOL_INDEX = {symbol.value: i for i, symbol in enumerate(SYMBOLS)}
BLANK_INDEX = SYMBOL_INDEX[TapeSymbol.BLANK.value]

STATUS_NAMES = {
    HALTED: "halted",
    STEP_LIMIT: "step_limit",
    TAPE_OVERFLOW: "tape_overflow",
}


@dataclass(frozen=True)
class CompiledProgram:
    states: list
    next_state: np.ndarray
    write: np.ndarray
    move: np.ndarray


@dataclass(frozen=True)
class BatchResult:
    a: int
    b: int
    steps: int
    status: str
    tape: str
    result: int

    @property
    def correct(self):
        return self.status == STATUS_NAMES[HALTED] and self.result == self.a * self.b


def compile_program(table):
    """Dense [state, symbol] arrays; the first transition for a key wins."""
    states = table.states()
    state_index = {name: i for i, name in enumerate(states)}
    shape = (len(states), len(SYMBOLS))

    next_state = np.full(shape, -1, dtype=np.int32)
    write = np.zeros(shape, dtype=np.int32)
    move = np.zeros(shape, dtype=np.int32)

    for (from_state, read_char), transition in table.compile().items():
        row, col = state_index[from_state], SYMBOL_INDEX[read_char]
        next_state[row, col] = state_index[transition.to_state]
        write[row, col] = SYMBOL_INDEX[transition.write.value]
        move[row, col] = transition.direction.offset

    return CompiledProgram(states, next_state, write, move)


def encode_tape(tape):
    return np.array([SYMBOL_INDEX[char] for char in tape], dtype=np.int32)


def decode_tape(cells):
    return "".join(SYMBOLS[int(cell)].value for cell in cells)


def evaluate_batch(table, operand_pairs, max_steps=-1, tape_size=512):
    """
    Run a x b for every pair on fixed-size tapes.
    Each initial tape starts at the centre of its buffer so it can grow both ways.
    """
    pairs = list(operand_pairs)
    compiled = table if isinstance(table, CompiledProgram) else compile_program(table)
    num_machines = len(pairs)

    tapes = np.full((num_machines, tape_size), BLANK_INDEX, dtype=np.int32)
    los = np.zeros(num_machines, dtype=np.int64)
    his = np.zeros(num_machines, dtype=np.int64)
    heads = np.zeros(num_machines, dtype=np.int64)
    steps = np.zeros(num_machines, dtype=np.int64)
    statuses = np.zeros(num_machines, dtype=np.int64)

    origin = tape_size // 2
    for idx, (a, b) in enumerate(pairs):
        validate_operands(a, b)
        initial = encode_tape(multiplication_tape(a, b))
        if origin + len(initial) > tape_size:
            raise ValueError(f"Tape size {tape_size} too small for {a} x {b}")
        tapes[idx, origin:origin + len(initial)] = initial
        los[idx] = origin
        his[idx] = origin + len(initial)
        heads[idx] = origin + START_HEAD

    if num_machines:
        simulate_batch(compiled.next_state, compiled.write, compiled.move,
                       tapes, los, his, heads, steps, statuses, BLANK_INDEX, max_steps)

    results = []
    for idx, (a, b) in enumerate(pairs):
        status = int(statuses[idx])
        tape = decode_tape(tapes[idx, los[idx]:his[idx]])
        result = extract_result(tape) if status == HALTED else 0
        results.append(BatchResult(a, b, int(steps[idx]), STATUS_NAMES[status], tape, result))
    return results
