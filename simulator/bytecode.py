from pathlib import Path

from simulator.symbols import (
    CODES_BY_SYMBOL,
    NUMBER,
    SPLIT,
    SYMBOL_CODES,
    direction_code,
    direction_from_code,
)
from simulator.transition import Transition, TransitionTable

TRANSITION_SEPARATOR = SPLIT * 2
FIELD_SEPARATOR = SPLIT
HEADER = SPLIT
FIELD_COUNT = 5

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class DecodeError(ValueError):
    pass


class ProgramLoadError(OSError):
    pass


# === DECODING ===
def split_transitions(text):
    """Drop the header byte, cut on the transition separator and discard the trailing chunk."""
    chunks = text[1:].split(TRANSITION_SEPARATOR)
    return [chunk.replace("\n", "").replace("\r", "") for chunk in chunks[:-1]]


def decode_symbol(count, index, field_name):
    if count not in SYMBOL_CODES:
        raise DecodeError(f"Transition {index}: {field_name} run length {count} maps to no symbol")
    return SYMBOL_CODES[count]


def decode_state(count, index, field_name):
    if count == 0:
        raise DecodeError(f"Transition {index}: empty {field_name} field")
    return f"q{count - 1}"


def decode_transition(chunk, index=1):
    fields = chunk.split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise DecodeError(f"Transition {index}: expected {FIELD_COUNT} fields, got {len(fields)} in {chunk!r}")

    from_len, read_len, to_len, write_len, direction_len = (len(field) for field in fields)
    return Transition(
        from_state=decode_state(from_len, index, "from-state"),
        read=decode_symbol(read_len, index, "read"),
        to_state=decode_state(to_len, index, "to-state"),
        write=decode_symbol(write_len, index, "write"),
        direction=direction_from_code(direction_len),
    )


def decode_program(text):
    """Decode bytecode text into a TransitionTable, preserving program order."""
    chunks = split_transitions(text)
    return TransitionTable(decode_transition(chunk, i) for i, chunk in enumerate(chunks, start=1))


def resolve_program_path(path):
    """Relative paths that do not exist here are looked up next to the installed packages."""
    path = Path(path)
    if path.exists() or path.is_absolute():
        return path
    bundled = PACKAGE_ROOT / path
    return bundled if bundled.exists() else path


def load_program(path):
    try:
        text = resolve_program_path(path).read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as e:
        raise ProgramLoadError(f"Could not read program file {path}: {e}") from e
    return decode_program(text)


# === ENCODING ===
def state_number(state):
    if not state.startswith("q") or not state[1:].isdigit():
        raise ValueError(f"State names must look like q<number>, got {state!r}")
    return int(state[1:])


def encode_transition(transition):
    fields = [
        NUMBER * (state_number(transition.from_state) + 1),
        NUMBER * CODES_BY_SYMBOL[transition.read],
        NUMBER * (state_number(transition.to_state) + 1),
        NUMBER * CODES_BY_SYMBOL[transition.write],
        NUMBER * direction_code(transition.direction),
    ]
    return FIELD_SEPARATOR.join(fields)


def encode_program(transitions):
    """Encode transitions as bytecode text, one transition per line."""
    lines = [encode_transition(t) + TRANSITION_SEPARATOR for t in transitions]
    return HEADER + "\n" + "\n".join(lines) + "\n"


def save_program(transitions, path):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="ascii") as f:
        f.write(encode_program(transitions))
