import json
import os
from datetime import datetime, timezone


class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="multiplication_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        self.log_batch([entry])

    def log_batch(self, entries: list):
        """Log a batch of entries to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def rotate(self):
        """Start a new main log file if the UTC date changed."""
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def log_run(self, a, b, result, config, elapsed=None):
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "a": a,
            "b": b,
            "result": result,
            "steps": config.steps,
            "halted": config.halted,
            "final_state": config.state,
            "tape": config.tape,
        }
        if elapsed is not None:
            entry["elapsed"] = round(elapsed, 6)
        self.log(entry)

    def log_trace(self, entries: list):
        """Log per-step trace events."""
        self._log_to_file(f"trace_{self.today}.jsonl", entries)

    def log_mismatch(self, entries: list):
        """Log operand pairs whose decoded product was wrong."""
        self._log_to_file(f"mismatch_{self.today}.jsonl", entries)
