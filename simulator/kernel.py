from numba import njit, prange

HALTED = 0
STEP_LIMIT = 1
TAPE_OVERFLOW = 2


@njit
def simulate_one(next_state, write, move, tape, lo, hi, head, blank, max_steps):
    """
    Run one machine on a fixed integer tape.
    The live tape is tape[lo:hi]; growing it means widening that window.
    max_steps < 0 means no limit.
    Returns (steps, lo, hi, head, status).
    """
    state = 0
    steps = 0

    while max_steps < 0 or steps < max_steps:
        symbol = tape[head]
        new_state = next_state[state, symbol]

        if new_state < 0:
            return steps, lo, hi, head, HALTED

        # Write symbol
        tape[head] = write[state, symbol]

        # Move head
        head += move[state, symbol]

        # Grow the live window
        if head >= hi:
            if hi >= tape.shape[0]:
                return steps + 1, lo, hi, head, TAPE_OVERFLOW
            tape[hi] = blank
            hi += 1
        elif head < lo:
            if lo == 0:
                return steps + 1, lo, hi, head, TAPE_OVERFLOW
            lo -= 1
            tape[lo] = blank

        state = new_state
        steps += 1

    return steps, lo, hi, head, STEP_LIMIT


@njit(parallel=True)
def simulate_batch(next_state, write, move, tapes, los, his, heads, steps, statuses, blank, max_steps):
    """Each row of tapes is one machine."""
    for idx in prange(tapes.shape[0]):
        result = simulate_one(next_state, write, move, tapes[idx], los[idx], his[idx], heads[idx], blank, max_steps)
        steps[idx] = result[0]
        los[idx] = result[1]
        his[idx] = result[2]
        heads[idx] = result[3]
        statuses[idx] = result[4]
