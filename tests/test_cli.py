import importlib
import json
import sys

import pytest

# Import run.py as a module and exercise parse_args + main with a patched
# start_server so we do not actually start networking.


@pytest.fixture()
def run_module():
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert "Rulesmith" in out


def test_default_command_is_serve(run_module):
    assert run_module.parse_args([]).command == "serve"


def test_formula_flag_requires_name_and_expr(run_module):
    with pytest.raises(SystemExit):
        run_module.parse_args(["table", "--formula", "VIT * 2"])
    ns = run_module.parse_args(["table", "--formula", "hp=VIT * 2", "--formula", "mp = INT"])
    assert ns.formulas == [("hp", "VIT * 2"), ("mp", " INT")]


def test_table_text_output(run_module, capsys):
    code = run_module.main(["table", "--levels", "3"])
    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert "Lvl" in out[0] and "Est. HP" in out[0] and "Est. MP" in out[0]
    assert len(out) == 4
    assert out[3].split() == ["3", "135", "435", "300", "375"]


def test_table_json_output_with_custom_formula(run_module, capsys):
    code = run_module.main(
        ["table", "--kind", "linear", "--base", "50", "--factor", "2", "--levels", "2", "--formula", "hp=VIT / 0", "--json"]
    )
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["level_count"] == 2
    assert data["rows"][1]["xp_needed"] == 200
    assert data["rows"][0]["errors"] == {"hp": "division_by_zero"}


def test_table_marks_failed_cells(run_module, capsys):
    run_module.main(["table", "--levels", "1", "--formula", "hp=VIT;"])
    last = capsys.readouterr().out.splitlines()[-1]
    assert last.split()[-1] == "Err"


def test_eval_command(run_module, capsys):
    assert run_module.main(["eval", "VIT * 10 + 50"]) == 0
    assert capsys.readouterr().out.strip() == "200"
    assert run_module.main(["eval", "INT * 10 + WIS * 5", "--level", "2"]) == 0
    assert capsys.readouterr().out.strip() == "300"


def test_eval_command_error_exit(run_module, capsys):
    assert run_module.main(["eval", "import os"]) == 1
    assert "invalid_expression" in capsys.readouterr().out


def test_serve_main_invokes_start_server(monkeypatch, run_module, capsys):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setattr(run_module.signal, "signal", lambda *a, **k: None)

    import rulesmith.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)

    assert run_module.main(["serve"]) == 0
    assert calls == {"host": "127.0.0.1", "port": 5555, "debug": False}
    out = capsys.readouterr().out
    assert "Rulesmith Preview Server" in out
    assert "5555" in out
