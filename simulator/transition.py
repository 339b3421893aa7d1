from dataclasses import dataclass

from simulator.symbols import Direction, TapeSymbol


@dataclass(frozen=True)
class Transition:
    from_state: str
    read: TapeSymbol
    to_state: str
    write: TapeSymbol
    direction: Direction

    def __str__(self):
        return (f"({self.from_state} ; {self.read.value}) = "
                f"({self.to_state} ; {self.write.value} ; {self.direction.value})")

    def as_tuple(self):
        return (self.from_state, self.read.value, self.to_state, self.write.value, self.direction.value)


class TransitionTable:
    """
    Ordered list of transitions with first-match lookup.
    The order is the program order of the bytecode and is never rearranged:
    when two transitions share (from_state, read), the earlier one wins.
    """

    def __init__(self, transitions=()):
        self._transitions = tuple(transitions)

    def __len__(self):
        return len(self._transitions)

    def __iter__(self):
        return iter(self._transitions)

    def __getitem__(self, index):
        return self._transitions[index]

    def lookup(self, state, read_char):
        for transition in self._transitions:
            if transition.from_state == state and transition.read.value == read_char:
                return transition
        return None

    def compile(self):
        """Map (state, read_char) -> Transition, keeping the first occurrence of each key."""
        compiled = {}
        for transition in self._transitions:
            compiled.setdefault((transition.from_state, transition.read.value), transition)
        return compiled

    def states(self):
        """All state names in order of first appearance, starting with q0."""
        seen = ["q0"]
        for transition in self._transitions:
            for state in (transition.from_state, transition.to_state):
                if state not in seen:
                    seen.append(state)
        return seen

    def shadowed(self):
        """Transitions that can never fire because an earlier one has the same key."""
        compiled = self.compile()
        return [t for t in self._transitions if compiled[(t.from_state, t.read.value)] is not t]
