import json
from pathlib import Path
from types import SimpleNamespace

from envview.commands.show_cmd import format_model, model_to_dict, run_show
from envview.config.models import EnvViewConfig
from envview.engine import load


def test_format_model_lists_keys_modes_and_diagnostics() -> None:
    model = load([
        "// @env-template",
        "PORT=3000",
        "// @env-mode:env.prod",
        "// PORT=8080",
        "// @env-bogus",
        "// @env-value:PORT(number constant)",
    ])
    text = format_model(model, model.initial_effective())

    assert "PORT  3000  [number constant]" in text
    assert "env: prod" in text
    assert "[malformed_tag] line 5" in text


def test_format_model_empty() -> None:
    model = load([])
    assert format_model(model, {}) == "No template keys found."


def test_model_to_dict(sample_lines) -> None:
    model = load(sample_lines)
    data = model_to_dict(model, model.initial_effective())

    by_key = {entry["key"]: entry for entry in data["keys"]}
    assert by_key["LOG_LEVEL"]["kind"] == "select"
    assert by_key["LOG_LEVEL"]["values"] == ["debug", "info", "warn", "error"]
    assert by_key["APP_NAME"]["flags"] == ["constant"]
    assert data["modes"] == {"env": ["dev", "prod"], "logging": ["quiet"]}
    assert data["diagnostics"] == []


def test_run_show_json(sample_env_file: Path, capsys) -> None:
    args = SimpleNamespace(file=sample_env_file, json=True)
    assert run_show(args, EnvViewConfig()) == 0

    data = json.loads(capsys.readouterr().out)
    assert [entry["key"] for entry in data["keys"]] == ["APP_NAME", "PORT", "LOG_LEVEL", "API_URL"]


def test_run_show_text(sample_env_file: Path, capsys) -> None:
    args = SimpleNamespace(file=sample_env_file, json=False)
    assert run_show(args, EnvViewConfig()) == 0
    assert "Modes:" in capsys.readouterr().out
