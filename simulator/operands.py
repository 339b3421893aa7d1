from simulator.symbols import BLANK, NUMBER, TapeSymbol

OPERATOR = "x"


class OperandError(ValueError):
    pass


def parse_multiplication(text):
    """Parse 'a x b' into two positive integers."""
    parts = text.lower().split(OPERATOR)
    if len(parts) != 2:
        raise OperandError("Please enter a multiplication in the form 'a x b'.")
    try:
        a, b = int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        raise OperandError("Please enter whole numbers only.") from None
    validate_operands(a, b)
    return a, b


def validate_operands(a, b):
    if a <= 0 or b <= 0:
        raise OperandError("Both factors must be positive.")


def multiplication_tape(a, b):
    """Initial tape: blank, a zeros, the calculation mark, b zeros, blank."""
    return BLANK + NUMBER * a + TapeSymbol.CALCULATION.value + NUMBER * b + BLANK
