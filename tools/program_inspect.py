import argparse

from simulator.bytecode import load_program
from simulator.symbols import TapeSymbol


def build_grid(table):
    """state -> {read_char: action} using the transition that would actually fire."""
    compiled = table.compile()
    grid = {}
    for state in table.states():
        grid[state] = {}
        for symbol in TapeSymbol:
            transition = compiled.get((state, symbol.value))
            if transition is None:
                grid[state][symbol.value] = "HALT"
            else:
                grid[state][symbol.value] = f"{transition.write.value}{transition.direction.value}{transition.to_state}"
    return grid


def pretty_print_program(table):
    """Print the program as a transition list, a state x symbol grid and a LaTeX table."""
    print("\n=== Transitions ===")
    for idx, transition in enumerate(table, start=1):
        print(f"{idx:>3}  {transition}")

    shadowed = table.shadowed()
    if shadowed:
        print("\n=== Unreachable (shadowed by an earlier transition) ===")
        for transition in shadowed:
            print(f"     {transition}")

    symbols = [symbol.value for symbol in TapeSymbol]
    grid = build_grid(table)

    # === Terminal Human-Readable Table ===
    print("\n=== Transition Table ===")
    print("\t".join([" "] + symbols))
    for state, actions in grid.items():
        print("\t".join([f"State {state}"] + [actions[s] for s in symbols]))

    # === LaTeX Table Output ===
    print("\n=== LaTeX Table ===")
    print(r"\begin{array}{c|" + "c" * len(symbols) + "}")
    print("State/Symbol & " + " & ".join([f"\\text{{{s}}}" for s in symbols]) + r" \\ \hline")
    for state, actions in grid.items():
        print(" & ".join([state] + [actions[s] for s in symbols]) + r" \\")
    print(r"\end{array}")

def main():
    parser = argparse.ArgumentParser(description="Turing Program Inspector")
    parser.add_argument("--program", default="programs/multiplication.tm", help="Path to a bytecode program")
    args = parser.parse_args()

    table = load_program(args.program)
    print(f"[INFO] Program {args.program}")
    print(f"  Transitions: {len(table)}")
    print(f"  States: {len(table.states())}")

    pretty_print_program(table)

if __name__ == "__main__":
    main()
