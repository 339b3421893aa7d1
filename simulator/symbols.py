from enum import Enum


class TapeSymbol(Enum):
    """Characters the machine can read from or write to the tape."""
    NUMBER = "0"
    SPLIT = "1"
    REPLACE_ZERO = "X"
    REPLACE_ONE = "Y"
    BLANK = "_"
    CALCULATION = "C"

    @classmethod
    def from_char(cls, char):
        for symbol in cls:
            if symbol.value == char:
                return symbol
        raise ValueError(f"Unknown tape character: {char!r}")


class Direction(Enum):
    LEFT = "L"
    RIGHT = "R"

    @property
    def offset(self):
        return -1 if self is Direction.LEFT else 1


# === RUN-LENGTH CODES ===
SYMBOL_CODES = {
    1: TapeSymbol.NUMBER,
    2: TapeSymbol.SPLIT,
    3: TapeSymbol.BLANK,
    4: TapeSymbol.CALCULATION,
    5: TapeSymbol.REPLACE_ONE,
    6: TapeSymbol.REPLACE_ZERO,
}
CODES_BY_SYMBOL = {symbol: code for code, symbol in SYMBOL_CODES.items()}

LEFT_CODE = 1
RIGHT_CODE = 2

BLANK = TapeSymbol.BLANK.value
SPLIT = TapeSymbol.SPLIT.value
NUMBER = TapeSymbol.NUMBER.value


def direction_from_code(count):
    # Anything but a single marker means RIGHT.
    return Direction.LEFT if count == LEFT_CODE else Direction.RIGHT


def direction_code(direction):
    return LEFT_CODE if direction is Direction.LEFT else RIGHT_CODE
