import sys
import os
import json

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

import app
from config.config_loader import DEFAULT_CONFIG
from simulator.bytecode import load_program

PROGRAM_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'programs', 'multiplication.tm'))


@pytest.fixture
def config_file(tmp_path):
    config = dict(DEFAULT_CONFIG, program_path=PROGRAM_PATH, output_directory=str(tmp_path / "logs"), step_delay=0)
    path = tmp_path / "runtime_config.json"
    path.write_text(json.dumps(config))
    return path


class TestRunMultiplication:

    def test_result_printed_and_logged(self, config_file, capsys):
        config = app.load_runtime_config(str(config_file))
        result = app.run_multiplication(config, load_program(PROGRAM_PATH), 3, 4, show_steps=False)
        assert result == 12
        assert "Result: 12" in capsys.readouterr().out
        log_files = os.listdir(config["output_directory"])
        assert len(log_files) == 1

    def test_show_steps(self, config_file, capsys):
        config = app.load_runtime_config(str(config_file))
        app.run_multiplication(config, load_program(PROGRAM_PATH), 1, 1, show_steps=True)
        out = capsys.readouterr().out
        assert "Step Nr: 11" in out
        assert "Result: 1" in out

    def test_step_budget_reported(self, config_file, capsys):
        config = app.load_runtime_config(str(config_file))
        config["max_steps"] = 3
        app.run_multiplication(config, load_program(PROGRAM_PATH), 2, 2, show_steps=False)
        assert "without halting" in capsys.readouterr().out


class TestCli:

    def test_multiply(self, config_file, capsys, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["app.py", "--multiply", "2x3", "--config", str(config_file)])
        app.main()
        assert "Result: 6" in capsys.readouterr().out

    def test_bad_operands_exit(self, config_file, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["app.py", "--multiply", "0x3", "--config", str(config_file)])
        with pytest.raises(SystemExit) as excinfo:
            app.main()
        assert excinfo.value.code == 2

    def test_missing_program_exit(self, config_file, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["app.py", "--multiply", "2x3", "--config", str(config_file),
                                          "--program", str(tmp_path / "missing.tm")])
        with pytest.raises(SystemExit) as excinfo:
            app.main()
        assert excinfo.value.code == 1

    def test_missing_config_exit(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["app.py", "--inspect", "--config", str(tmp_path / "none.json")])
        with pytest.raises(SystemExit):
            app.main()
