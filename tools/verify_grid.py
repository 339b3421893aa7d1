# tools/verify_grid.py

import argparse
import hashlib
import json
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from logger.logger import JSONLogger
from simulator.bytecode import load_program, resolve_program_path
from simulator.evaluator import BatchResult, compile_program, evaluate_batch
from simulator.turing_machine import multiply

console = Console()

# === Reference Engine ===
def evaluate_reference(table, operand_pairs, max_steps=-1):
    """Same contract as evaluate_batch, using the step-by-step engine."""
    results = []
    for a, b in operand_pairs:
        result, config = multiply(table, a, b, max_steps=max_steps if max_steps > 0 else None)
        status = "halted" if config.halted else "step_limit"
        results.append(BatchResult(a, b, config.steps, status, config.tape, result if config.halted else 0))
    return results

# === Utility Loaders ===
def operand_grid(grid_max):
    return [(a, b) for a in range(1, grid_max + 1) for b in range(1, grid_max + 1)]

def pair_key(a, b):
    return f"{a}x{b}"

def hash_program(program_path):
    """Hash the program text deterministically."""
    return hashlib.sha256(resolve_program_path(program_path).read_bytes()).hexdigest()

def load_checkpoint(checkpoint_path, settings):
    """Completed pairs, or an empty list when the checkpoint was made with other settings."""
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        if checkpoint.get("settings") != settings:
            console.print("[yellow][WARNING] Program or settings changed since the last run. Starting over.[/yellow]")
            return None
        return checkpoint.get("completed", [])
    return []

def save_checkpoint(completed, checkpoint_path, settings):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"settings": settings, "completed": completed}, f, indent=4)

def result_entry(result):
    return {
        "a": result.a,
        "b": result.b,
        "expected": result.a * result.b,
        "result": result.result,
        "steps": result.steps,
        "status": result.status,
        "correct": result.correct,
    }

# === Main Verification Runner ===
def verify_grid(program_path, grid_max=12, batch_size=64, max_steps=-1, tape_size=512,
                results_root="results", use_engine=False, logger=None):
    """
    Run every a x b with 1 <= a, b <= grid_max and record whether the decoded
    product is right. Finished pairs are checkpointed so a rerun resumes.
    Returns the list of result entries written in this call.
    """
    table = load_program(program_path)
    compiled = compile_program(table)

    results_folder = Path(results_root) / Path(program_path).stem
    results_folder.mkdir(parents=True, exist_ok=True)
    results_file = results_folder / "results.jsonl"
    checkpoint_file = results_folder / "results_checkpoint.json"

    settings = {
        "program_sha256": hash_program(program_path),
        "max_steps": max_steps,
        "tape_size": None if use_engine else tape_size,
        "engine": "reference" if use_engine else "kernel",
    }

    all_pairs = operand_grid(grid_max)
    completed = load_checkpoint(checkpoint_file, settings)
    results_mode = "a"
    if completed is None:
        completed = []
        results_mode = "w"
    done = set(completed)
    pending = [pair for pair in all_pairs if pair_key(*pair) not in done]
    console.print(f"Loaded {len(all_pairs):,} operand pairs. {len(pending):,} pending.")

    written = []
    with open(results_file, results_mode, encoding="utf-8") as results_fh, Progress(
            SpinnerColumn(),
            BarColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            TextColumn("{task.completed}/{task.total} Pairs"),
            TimeElapsedColumn(),
            console=console
    ) as progress:
        task = progress.add_task("[cyan]Verifying...", total=len(pending))

        for batch_start in range(0, len(pending), batch_size):
            batch = pending[batch_start:batch_start + batch_size]

            try:
                if use_engine:
                    results = evaluate_reference(table, batch, max_steps=max_steps)
                else:
                    results = evaluate_batch(compiled, batch, max_steps=max_steps, tape_size=tape_size)
            except ValueError as e:
                console.print(f"[yellow][WARNING] Batch starting at {pair_key(*batch[0])} failed: {e}[/yellow]")
                progress.update(task, advance=len(batch))
                continue

            entries = [result_entry(r) for r in results]
            mismatches = [entry for entry in entries if not entry["correct"]]

            # === BULK WRITE once per batch ===
            for entry in entries:
                results_fh.write(json.dumps(entry) + "\n")
            results_fh.flush()
            if mismatches and logger is not None:
                logger.rotate()
                logger.log_mismatch(mismatches)

            completed.extend(pair_key(r.a, r.b) for r in results)
            save_checkpoint(completed, checkpoint_file, settings)
            written.extend(entries)
            progress.update(task, advance=len(batch))

    wrong = sum(1 for entry in written if not entry["correct"])
    if wrong:
        console.print(f"[red]{wrong:,} of {len(written):,} pairs produced a wrong product.[/red]")
    else:
        console.print(f"[green]All {len(written):,} pairs verified.[/green]")
    return written


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Verify a multiplication program over a grid of operands.")
    parser.add_argument("--program", default="programs/multiplication.tm", help="Path to a bytecode program")
    parser.add_argument("--grid_max", type=int, default=12, help="Largest factor to try")
    parser.add_argument("--batch_size", type=int, default=64, help="Pairs per batch and checkpoint")
    parser.add_argument("--max_steps", type=int, default=-1, help="Step limit per machine (-1 for none)")
    parser.add_argument("--tape_size", type=int, default=512, help="Tape buffer size (cells)")
    parser.add_argument("--results", default="results", help="Results root folder")
    parser.add_argument("--engine", action="store_true", help="Use the step-by-step engine instead of the batch kernel")
    parser.add_argument("--log_dir", default="logs/", help="Directory for mismatch logs")
    args = parser.parse_args()

    verify_grid(
        args.program,
        grid_max=args.grid_max,
        batch_size=args.batch_size,
        max_steps=args.max_steps,
        tape_size=args.tape_size,
        results_root=args.results,
        use_engine=args.engine,
        logger=JSONLogger(args.log_dir)
    )

if __name__ == "__main__":
    main()
