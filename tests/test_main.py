"""Tests for the command line entry point."""
import logging
from pathlib import Path

import allure
import pytest

from aika.constants import APP_VERSION
from aika.main import build_parser, main


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text('[prompts.echo]\nprompt = "{input}"\n', encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert APP_VERSION in capsys.readouterr().out


@allure.feature("Command Line")
@allure.story("Usage errors exit with status 2")
@allure.severity(allure.severity_level.NORMAL)
@pytest.mark.parametrize("argv", [
    [],
    ["summon"],
    ["query", "--wrap", "0"],
    ["query", "--wrap", "wide"],
    ["list-models", "--bogus"],
])
def test_usage_errors_exit_with_2(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)

    assert exc_info.value.code == 2


def test_query_options_are_parsed():
    args = build_parser().parse_args([
        "--config", "c.toml", "--debug",
        "query", "-i", "file:a.txt", "--prompt", "review", "-p", "gpt", "-m", "gpt-4o-mini",
        "--stream", "--wrap", "72", "--markdown",
    ])

    assert args.config == "c.toml"
    assert args.debug
    assert args.command == "query"
    assert args.input == "file:a.txt"
    assert args.prompt == "review"
    assert args.provider == "gpt"
    assert args.model == "gpt-4o-mini"
    assert args.stream and args.markdown
    assert args.wrap == 72


@allure.feature("Command Line")
@allure.story("Errors exit with status 1")
@allure.severity(allure.severity_level.CRITICAL)
def test_unknown_prompt_exits_with_1(config_file: Path, capsys):
    code = main(["--config", str(config_file), "query", "-i", "cmd:echo hi", "--prompt", "missing"])

    assert code == 1
    assert "Unknown prompt: 'missing'" in capsys.readouterr().err


def test_nothing_to_send_exits_with_1(config_file: Path, capsys):
    assert main(["--config", str(config_file), "query"]) == 1
    assert "Nothing to send" in capsys.readouterr().err


def test_malformed_config_exits_with_1(tmp_path: Path, capsys):
    path = tmp_path / "broken.toml"
    path.write_text("[credentials\n", encoding="utf-8")

    assert main(["--config", str(path), "query", "-i", "cmd:echo hi"]) == 1
    assert "Invalid TOML" in capsys.readouterr().err


def test_missing_credential_exits_with_1(config_file: Path, capsys, monkeypatch):
    monkeypatch.delenv("MISTRAL_API_KEY", raising=False)

    code = main(["--config", str(config_file), "query", "-i", "cmd:echo hi", "-p", "mistral"])

    assert code == 1
    assert "no API key configured" in capsys.readouterr().err


def test_interrupt_exits_with_130(config_file: Path, monkeypatch):
    def interrupted(args):
        raise KeyboardInterrupt

    monkeypatch.setattr("aika.main.run", interrupted)

    assert main(["--config", str(config_file), "query"]) == 130


def test_debug_enables_debug_logging(config_file: Path):
    main(["--config", str(config_file), "--debug", "query"])

    assert logging.getLogger().level == logging.DEBUG


@allure.feature("Command Line")
@allure.story("Config and debug options follow the command name")
@allure.severity(allure.severity_level.NORMAL)
@pytest.mark.parametrize("command", [["query"], ["list-models"], ["repl"]])
def test_common_options_after_command(command):
    args = build_parser().parse_args(command + ["--config", "after.toml", "--debug"])

    assert args.config == "after.toml"
    assert args.debug is True


def test_common_options_before_command_are_kept():
    args = build_parser().parse_args(["--config", "before.toml", "--debug", "query", "-i", "-"])

    assert args.config == "before.toml"
    assert args.debug is True


def test_common_options_default_when_absent():
    args = build_parser().parse_args(["query"])

    assert args.config is None
    assert args.debug is False


def test_query_accepts_config_and_debug_after_command(config_file: Path, capsys):
    code = main([
        "query", "-i", "cmd:echo hi", "--prompt", "missing",
        "--config", str(config_file), "--debug",
    ])

    assert code == 1
    assert "Unknown prompt: 'missing'" in capsys.readouterr().err
    assert logging.getLogger().level == logging.DEBUG
