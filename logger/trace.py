import time

from rich.console import Console


def event_to_dict(event):
    return {
        "step": event.step,
        "transition": list(event.transition.as_tuple()),
        "tape": event.tape,
        "head": event.head,
        "state": event.state,
    }


class ConsoleTrace:
    """Prints every step with a pointer line under the head."""

    def __init__(self, console=None, delay=0.1):
        self.console = console or Console(highlight=False)
        self.delay = delay

    def __call__(self, event):
        pointer = "".join("^" if i == event.head else " " for i in range(len(event.tape)))
        self.console.print(f"Step Nr: {event.step}", markup=False)
        self.console.print(str(event.transition), markup=False)
        self.console.print(event.tape, markup=False, soft_wrap=True)
        self.console.print(pointer.rstrip(), markup=False, soft_wrap=True)
        if self.delay:
            time.sleep(self.delay)


class JSONTrace:
    """Buffers step events and writes them through a JSONLogger."""

    def __init__(self, logger, flush_every=1000):
        self.logger = logger
        self.flush_every = flush_every
        self.buffer = []

    def __call__(self, event):
        self.buffer.append(event_to_dict(event))
        if len(self.buffer) >= self.flush_every:
            self.flush()

    def flush(self):
        if self.buffer:
            self.logger.rotate()
            self.logger.log_trace(self.buffer)
            self.buffer = []


class TraceFanout:
    """Forward each event to several sinks, in order."""

    def __init__(self, *sinks):
        self.sinks = [sink for sink in sinks if sink is not None]

    def __call__(self, event):
        for sink in self.sinks:
            sink(event)
