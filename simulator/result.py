from simulator.symbols import BLANK


def extract_result(tape):
    """
    Decode the product from a halted tape.

    Any double blank marks a collapsed tape and yields 0. Otherwise the answer
    is the length of the rightmost blank-separated block; blanks at the very
    end of the tape do not open a new block.
    """
    if BLANK * 2 in tape:
        return 0

    fragments = tape.split(BLANK)
    while fragments and fragments[-1] == "":
        fragments.pop()
    if not fragments:
        return 0
    return len(fragments[-1])
