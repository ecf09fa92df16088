"""
Tests for the CommandProvider.

Uses real TOML files. Tests command loading, matching, filtering, and
registration of each command as a custom action.
"""

from unittest.mock import patch

import toml

from omnibar.actions.custom import CustomActionRegistry
from omnibar.actions.dispatcher import Dispatcher
from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import CustomAction
from omnibar.search.providers.commands import CommandProvider, load_commands


class TestCommandsLoading:
    """Test loading commands from TOML files."""

    def test_loads_valid_commands(self, tmp_commands):
        commands = load_commands(tmp_commands)
        assert set(commands) == {"backup", "notes"}
        assert commands["backup"]["exec"] == "echo backup"

    def test_skips_malformed_commands(self, tmp_path):
        """Commands missing 'exec' field should be skipped."""
        commands_path = tmp_path / "commands.toml"
        data = {
            "commands": {
                "good": {"description": "Works", "exec": "echo ok"},
                "bad": {"description": "Missing exec field"},
                "also_bad": "not a dict",
            }
        }
        commands_path.write_text(toml.dumps(data))

        commands = load_commands(commands_path)
        assert list(commands) == ["good"]

    def test_missing_file_returns_no_commands(self, tmp_path):
        assert load_commands(tmp_path / "nope.toml") == {}

    def test_invalid_toml_returns_no_commands(self, tmp_path):
        path = tmp_path / "commands.toml"
        path.write_text("[commands\nbroken = ")
        assert load_commands(path) == {}


class TestCommandsMatching:
    """Test the search() filtering logic."""

    def _search(self, tmp_commands, query):
        provider = CommandProvider.from_file(CustomActionRegistry(), tmp_commands)
        return list(provider.search(query, CancellationToken()))

    def test_requires_exclamation_prefix(self, tmp_commands):
        assert self._search(tmp_commands, "backup") == []

    def test_bare_exclamation_shows_all(self, tmp_commands):
        results = self._search(tmp_commands, "!")
        assert [r.title for r in results] == ["!backup", "!notes"]

    def test_filter_by_name(self, tmp_commands):
        results = self._search(tmp_commands, "!back")
        assert [r.title for r in results] == ["!backup"]
        assert results[0].action == CustomAction("command:backup")

    def test_filter_by_description(self, tmp_commands):
        results = self._search(tmp_commands, "!scratch")
        assert [r.title for r in results] == ["!notes"]

    def test_unknown_command_yields_nothing(self, tmp_commands):
        assert self._search(tmp_commands, "!nonexistent") == []


class TestCommandsExecution:

    def test_commands_are_registered_as_custom_actions(self, tmp_commands):
        registry = CustomActionRegistry()
        CommandProvider.from_file(registry, tmp_commands)
        assert "command:backup" in registry
        assert "command:notes" in registry

    def test_dispatch_spawns_command(self, tmp_commands, system):
        registry = CustomActionRegistry()
        CommandProvider.from_file(registry, tmp_commands)
        dispatcher = Dispatcher(system=system, custom=registry)

        with patch("omnibar.search.providers.commands.subprocess.Popen") as popen:
            outcome = dispatcher.dispatch(CustomAction("command:backup"))

        assert outcome.ok
        assert popen.call_args[0][0] == "echo backup"

    def test_spawn_failure_is_reported(self, tmp_commands, system):
        registry = CustomActionRegistry()
        CommandProvider.from_file(registry, tmp_commands)
        dispatcher = Dispatcher(system=system, custom=registry)

        with patch("omnibar.search.providers.commands.subprocess.Popen", side_effect=OSError("no shell")):
            outcome = dispatcher.dispatch(CustomAction("command:notes"))

        assert not outcome.ok
        assert "echo notes" in outcome.reason
