"""Tests for slash command discovery and execution."""
from typing import Any

import allure
import pytest

from aika.command_system import CommandRegistry, CommandResult, SlashCommand, get_command_registry
from aika.errors import NetworkError


class FakeSession:
    def __init__(self):
        self.history = [("first prompt", "first answer"), ("second", "reply")]

    def clear_history(self):
        self.history.clear()


class BrokenCommand(SlashCommand):
    name = "broken"
    description = "Always fails"

    def run(self, args: str = "", **kwargs: Any) -> CommandResult:
        raise NetworkError("Anthropic", "connection refused")


@allure.feature("Slash Commands")
@allure.story("Built-in commands are discovered")
@allure.severity(allure.severity_level.CRITICAL)
def test_builtin_commands_are_discovered():
    names = [cmd["name"] for cmd in CommandRegistry().list_commands()]

    assert names == ["clear", "help", "history", "models", "quit"]


@pytest.mark.parametrize("alias", ["quit", "exit", "q", "QUIT"])
def test_quit_aliases(alias):
    result = CommandRegistry().execute(alias)

    assert result.should_exit
    assert result.is_success


def test_unknown_command_is_an_error():
    result = CommandRegistry().execute("frobnicate")

    assert result.is_error
    assert "Unknown command: /frobnicate" in result.message


def test_help_lists_commands():
    result = CommandRegistry().execute("help")

    assert result.is_success
    for name in ("/help", "/clear", "/history", "/models", "/quit"):
        assert name in result.message


def test_history_is_numbered():
    result = CommandRegistry().execute("history", session=FakeSession())

    assert result.message == (
        "1. You: first prompt\n"
        "   AI: first answer\n"
        "2. You: second\n"
        "   AI: reply"
    )


def test_history_when_empty():
    session = FakeSession()
    session.history = []

    assert CommandRegistry().execute("history", session=session).message == "No conversation history."


def test_clear_empties_history():
    session = FakeSession()

    result = CommandRegistry().execute("clear", session=session)

    assert result.is_success
    assert session.history == []


def test_session_commands_need_a_session():
    registry = CommandRegistry()

    for name in ("clear", "history", "models"):
        assert registry.execute(name).is_error


def test_aika_errors_become_error_results():
    registry = CommandRegistry(discover=False)
    registry.register(BrokenCommand())

    result = registry.execute("broken")

    assert result.is_error
    assert "connection refused" in result.message


def test_shared_registry_is_reused():
    assert get_command_registry() is get_command_registry()
    assert "help" in get_command_registry()
