# app.py

import argparse
import sys
import time

from rich.console import Console
from rich.prompt import Prompt, IntPrompt, Confirm, FloatPrompt

from config.config_loader import DEFAULT_CONFIG_PATH, load_config, save_config
from logger.logger import JSONLogger
from logger.trace import ConsoleTrace, JSONTrace, TraceFanout
from simulator.bytecode import DecodeError, ProgramLoadError, load_program
from simulator.operands import OperandError, parse_multiplication
from simulator.turing_machine import multiply
from tools.program_inspect import pretty_print_program
from tools.verify_grid import verify_grid

console = Console()

# === Utilities ===
def load_runtime_config(path=DEFAULT_CONFIG_PATH, verbose=False):
    try:
        return load_config(path, verbose=verbose)
    except FileNotFoundError:
        console.print(f"[red]Error: {path} not found![/red]")
        sys.exit(1)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Error: invalid configuration: {e}[/red]")
        sys.exit(1)

def load_table(program_path):
    try:
        return load_program(program_path)
    except ProgramLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except DecodeError as e:
        console.print(f"[red]Error: program {program_path} is malformed: {e}[/red]")
        sys.exit(1)

def show_main_menu():
    console.print("\n[bold cyan]Turing Machine Multiplier[/bold cyan]")
    console.print("[1] Multiply")
    console.print("[2] Verify Operand Grid")
    console.print("[3] Inspect Program")
    console.print("[4] Edit Config")
    console.print("[5] Exit")

def ask_multiplication():
    while True:
        text = Prompt.ask("Please enter a multiplication in the form 'a x b'")
        try:
            return parse_multiplication(text)
        except OperandError as e:
            console.print(f"[red]Error: {e}[/red]")

def run_multiplication(config, table, a, b, show_steps):
    logger = JSONLogger(config["output_directory"], config["log_file_prefix"])
    json_trace = JSONTrace(logger) if config["trace_log"] else None
    console_trace = ConsoleTrace(console, delay=config["step_delay"]) if show_steps else None
    sinks = TraceFanout(console_trace, json_trace)

    started = time.perf_counter()
    result, machine_config = multiply(table, a, b, max_steps=config["max_steps"],
                                      trace=sinks if sinks.sinks else None)
    elapsed = time.perf_counter() - started

    if json_trace is not None:
        json_trace.flush()
    logger.log_run(a, b, result, machine_config, elapsed=elapsed)

    if show_steps:
        console.print(machine_config.tape, markup=False, soft_wrap=True)
    if not machine_config.halted:
        console.print(f"[yellow]Stopped after {machine_config.steps:,} steps without halting.[/yellow]")
    console.print(f"\nResult: {result}\n")
    return result

def handle_multiply(config):
    console.print("\n[bold]Multiply[/bold]")
    table = load_table(config["program_path"])
    a, b = ask_multiplication()
    show_steps = Confirm.ask("Show the result step by step?", default=config["show_steps"])
    run_multiplication(config, table, a, b, show_steps)

def handle_verify(config):
    console.print("\n[bold]Verify Operand Grid[/bold]")
    grid_max = IntPrompt.ask("Largest factor", default=config["grid_max"])
    use_engine = Confirm.ask("Use the step-by-step engine instead of the batch kernel?", default=False)

    console.print(f"[cyan]Verifying {grid_max} x {grid_max} grid...[/cyan]")
    verify_grid(
        config["program_path"],
        grid_max=grid_max,
        batch_size=config["batch_size"],
        max_steps=config["max_steps"] or -1,
        tape_size=config["tape_size"],
        use_engine=use_engine,
        logger=JSONLogger(config["output_directory"], config["log_file_prefix"])
    )

def handle_inspect(config):
    console.print("\n[bold]Inspect Program[/bold]")
    program_path = Prompt.ask("Program path", default=config["program_path"])
    pretty_print_program(load_table(program_path))

def handle_edit_config(config, path=DEFAULT_CONFIG_PATH):
    console.print("\n[bold]Edit Configuration[/bold]")

    program_path = Prompt.ask("Program path", default=config["program_path"])
    show_steps = Confirm.ask("Show steps by default?", default=config["show_steps"])
    step_delay = FloatPrompt.ask("Delay between printed steps (seconds)", default=float(config["step_delay"]))
    max_steps = IntPrompt.ask("Max Steps (0 for no limit)", default=config["max_steps"] or 0)
    trace_log = Confirm.ask("Write step traces to the log directory?", default=config["trace_log"])
    batch_size = IntPrompt.ask("Batch Size", default=config["batch_size"])
    tape_size = IntPrompt.ask("Tape Size", default=config["tape_size"])
    grid_max = IntPrompt.ask("Largest factor for grid verification", default=config["grid_max"])

    config.update({
        "program_path": program_path,
        "show_steps": show_steps,
        "step_delay": step_delay,
        "max_steps": max_steps if max_steps > 0 else None,
        "trace_log": trace_log,
        "batch_size": batch_size,
        "tape_size": tape_size,
        "grid_max": grid_max
    })

    try:
        save_config(config, path)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Configuration not saved: {e}[/red]")
        return
    console.print("[green]Configuration updated successfully.[/green]")


def interactive_main(config_path=DEFAULT_CONFIG_PATH):
    config = load_runtime_config(config_path)

    while True:
        show_main_menu()
        choice = Prompt.ask("\nChoose an option", choices=["1", "2", "3", "4", "5"], default="5")

        if choice == "1":
            handle_multiply(config)
        elif choice == "2":
            handle_verify(config)
        elif choice == "3":
            handle_inspect(config)
        elif choice == "4":
            handle_edit_config(config, config_path)
            config = load_runtime_config(config_path)
        elif choice == "5":
            console.print("[bold green]Goodbye![/bold green]")
            break

# === CLI Mode for Automation ===
def cli_main(args):
    config = load_runtime_config(args.config, verbose=args.verbose)
    if args.program:
        config["program_path"] = args.program
    if args.max_steps is not None:
        config["max_steps"] = args.max_steps if args.max_steps > 0 else None

    if args.inspect:
        pretty_print_program(load_table(config["program_path"]))
    if args.multiply:
        try:
            a, b = parse_multiplication(args.multiply)
        except OperandError as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(2)
        table = load_table(config["program_path"])
        run_multiplication(config, table, a, b, args.steps or config["show_steps"])
    if args.verify:
        verify_grid(
            config["program_path"],
            grid_max=args.verify,
            batch_size=config["batch_size"],
            max_steps=config["max_steps"] or -1,
            tape_size=config["tape_size"],
            logger=JSONLogger(config["output_directory"], config["log_file_prefix"])
        )

def main():
    parser = argparse.ArgumentParser(description="Unary multiplication on a bytecode-driven Turing machine")
    parser.add_argument("--multiply", metavar="'a x b'", help="Multiply immediately, e.g. '3x4'")
    parser.add_argument("--steps", action="store_true", help="Print every step of the run")
    parser.add_argument("--verify", type=int, metavar="N", help="Verify every a x b with a, b <= N")
    parser.add_argument("--inspect", action="store_true", help="Print the loaded program")
    parser.add_argument("--program", help="Override the bytecode program path")
    parser.add_argument("--max-steps", type=int, help="Stop a run after this many steps (0 for no limit)")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Runtime configuration file")
    parser.add_argument("--verbose", action="store_true", help="Print the loaded configuration")
    args = parser.parse_args()

    if args.multiply or args.verify or args.inspect:
        cli_main(args)
    else:
        interactive_main(args.config)

if __name__ == "__main__":
    main()
