import json
import os
from datetime import datetime

DEFAULT_CONFIG_PATH = "config/runtime_config.json"
PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_CONFIG = {
    "program_path": "programs/multiplication.tm",
    "show_steps": False,
    "step_delay": 0.1,
    "max_steps": None,
    "trace_log": False,
    "output_directory": "logs/",
    "log_file_prefix": "multiplication_",
    "batch_size": 64,
    "tape_size": 512,
    "grid_max": 12
}

# Expected types for validation
CONFIG_SCHEMA = {
    "program_path": str,
    "show_steps": bool,
    "step_delay": (int, float),
    "max_steps": (int, type(None)),
    "trace_log": bool,
    "output_directory": str,
    "log_file_prefix": str,
    "batch_size": int,
    "tape_size": int,
    "grid_max": int
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass; only accept it where bool is expected
        value = config[key]
        if isinstance(value, bool) and expected_type is not bool:
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(value)}.")
        if not isinstance(value, expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(value)}.")

    if config["step_delay"] < 0:
        raise ValueError("step_delay must not be negative.")
    if config["max_steps"] is not None and config["max_steps"] <= 0:
        raise ValueError("max_steps must be positive, or null for no limit.")
    for key in ("batch_size", "tape_size", "grid_max"):
        if config[key] <= 0:
            raise ValueError(f"{key} must be positive.")

def load_config(path=DEFAULT_CONFIG_PATH, verbose=True):
    # Relative paths missing from the working directory fall back to the installed copy
    if not os.path.exists(path) and not os.path.isabs(path):
        bundled = os.path.join(PACKAGE_ROOT, path)
        if os.path.exists(bundled):
            path = bundled

    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    # Validate schema
    validate_config(config)

    # Validate output directory
    os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config

def save_config(config, path=DEFAULT_CONFIG_PATH):
    validate_config(config)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
