"""
Tests for the numba batch evaluator.

The kernel must agree with the step-by-step engine on every halted machine.
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from simulator.bytecode import load_program
from simulator.evaluator import compile_program, decode_tape, encode_tape, evaluate_batch
from simulator.symbols import Direction, TapeSymbol
from simulator.transition import Transition, TransitionTable
from simulator.turing_machine import multiply

PROGRAM_PATH = os.path.join(os.path.dirname(__file__), '..', 'programs', 'multiplication.tm')


def t(from_state, read, to_state, write, direction):
    return Transition(from_state, TapeSymbol.from_char(read), to_state, TapeSymbol.from_char(write), Direction(direction))


@pytest.fixture(scope="module")
def multiplication():
    return load_program(PROGRAM_PATH)


class TestCompileProgram:

    def test_shapes_and_start_state(self, multiplication):
        compiled = compile_program(multiplication)
        assert compiled.states[0] == "q0"
        assert compiled.next_state.shape == (8, len(TapeSymbol))
        assert compiled.next_state.dtype == np.int32

    def test_missing_transitions_marked(self):
        compiled = compile_program(TransitionTable([t("q0", "0", "q1", "X", "L")]))
        zero = list(TapeSymbol).index(TapeSymbol.NUMBER)
        x = list(TapeSymbol).index(TapeSymbol.REPLACE_ZERO)
        assert compiled.next_state[0, zero] == 1
        assert compiled.write[0, zero] == x
        assert compiled.move[0, zero] == -1
        assert (compiled.next_state[1] == -1).all()

    def test_first_duplicate_wins(self):
        compiled = compile_program(TransitionTable([
            t("q0", "0", "q1", "X", "R"),
            t("q0", "0", "q2", "Y", "L"),
        ]))
        zero = list(TapeSymbol).index(TapeSymbol.NUMBER)
        assert compiled.next_state[0, zero] == 1
        assert compiled.move[0, zero] == 1

    def test_tape_codec(self):
        assert decode_tape(encode_tape("_0C1XY")) == "_0C1XY"


class TestEvaluateBatch:

    def test_matches_engine(self, multiplication):
        pairs = [(a, b) for a in range(1, 6) for b in range(1, 6)]
        results = evaluate_batch(multiplication, pairs, tape_size=128)
        for batch_result, (a, b) in zip(results, pairs):
            expected, config = multiply(multiplication, a, b)
            assert batch_result.status == "halted"
            assert batch_result.result == expected == a * b
            assert batch_result.steps == config.steps
            assert batch_result.tape == config.tape
            assert batch_result.correct

    def test_step_limit(self, multiplication):
        [result] = evaluate_batch(multiplication, [(3, 3)], max_steps=10, tape_size=64)
        assert result.status == "step_limit"
        assert result.steps == 10
        assert not result.correct

    def test_tape_overflow(self, multiplication):
        [result] = evaluate_batch(multiplication, [(4, 4)], tape_size=24)
        assert result.status == "tape_overflow"
        assert result.result == 0

    def test_left_growth(self):
        table = TransitionTable([
            t("q0", "0", "q1", "X", "L"),
            t("q1", "_", "q2", "Y", "L"),
        ])
        [result] = evaluate_batch(table, [(1, 1)], tape_size=32)
        assert result.status == "halted"
        assert result.tape == "_YXC0_"
        assert result.steps == 2

    def test_tape_too_small_for_input(self, multiplication):
        with pytest.raises(ValueError):
            evaluate_batch(multiplication, [(10, 10)], tape_size=16)

    def test_empty_batch(self, multiplication):
        assert evaluate_batch(multiplication, []) == []

    def test_accepts_compiled_program(self, multiplication):
        compiled = compile_program(multiplication)
        [result] = evaluate_batch(compiled, [(2, 5)], tape_size=64)
        assert result.result == 10
