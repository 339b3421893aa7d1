from dataclasses import dataclass
from typing import Callable, Optional

from simulator.operands import multiplication_tape, validate_operands
from simulator.result import extract_result
from simulator.symbols import BLANK
from simulator.transition import Transition

START_STATE = "q0"
START_HEAD = 1


@dataclass(frozen=True)
class Applied:
    step: int
    transition: Transition


@dataclass(frozen=True)
class Halted:
    state: str
    read: str


@dataclass(frozen=True)
class StepEvent:
    step: int
    transition: Transition
    tape: str
    head: int
    state: str


@dataclass(frozen=True)
class MachineConfiguration:
    state: str
    head: int
    tape: str
    steps: int
    halted: bool


class TuringMachine:
    """
    Single-tape deterministic machine driven by a TransitionTable.

    The machine halts when no transition matches (state, symbol under head).
    There is no halting state and no built-in step limit; run() only stops
    early when the caller passes max_steps.
    """

    def __init__(self, table, tape, head=START_HEAD, state=START_STATE):
        if not 0 <= head < len(tape):
            raise ValueError(f"Head position {head} is outside a tape of length {len(tape)}")
        self.table = table
        self.tape = list(tape)
        self.head = head
        self.current_state = state
        self.steps = 0
        self.halted = False

    @property
    def tape_string(self):
        return "".join(self.tape)

    def read(self):
        return self.tape[self.head]

    def step(self):
        if self.halted:
            return Halted(self.current_state, self.read())

        transition = self.table.lookup(self.current_state, self.read())
        if transition is None:
            self.halted = True
            return Halted(self.current_state, self.read())

        self.steps += 1
        self.tape[self.head] = transition.write.value
        self.head += transition.direction.offset
        self._expand_tape_if_needed()
        self.current_state = transition.to_state
        return Applied(self.steps, transition)

    def _expand_tape_if_needed(self):
        if self.head >= len(self.tape):
            self.tape.append(BLANK)
        elif self.head < 0:
            self.tape.insert(0, BLANK)
            self.head += 1

    def run(self, max_steps=None, trace: Optional[Callable[[StepEvent], None]] = None):
        """Step until halted, or until max_steps steps were applied by this call."""
        applied = 0
        while max_steps is None or applied < max_steps:
            outcome = self.step()
            if isinstance(outcome, Halted):
                break
            applied += 1
            if trace is not None:
                trace(StepEvent(outcome.step, outcome.transition, self.tape_string, self.head, self.current_state))
        return self.configuration()

    def configuration(self):
        return MachineConfiguration(self.current_state, self.head, self.tape_string, self.steps, self.halted)

    def result(self):
        return extract_result(self.tape_string)

    def visualize(self):
        """Display the tape with a pointer under the head."""
        pointer = "".join("^" if i == self.head else " " for i in range(len(self.tape)))
        print(self.tape_string)
        print(pointer.rstrip())
        print(f"State: {self.current_state}, Steps: {self.steps}, Halted: {self.halted}")


def multiply(table, a, b, max_steps=None, trace=None):
    """Run the table on the tape for a x b. Returns (result, configuration)."""
    validate_operands(a, b)
    machine = TuringMachine(table, multiplication_tape(a, b))
    config = machine.run(max_steps=max_steps, trace=trace)
    return extract_result(config.tape), config
