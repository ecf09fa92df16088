"""
End-to-end tests through create_palette: real settings file, real file
tree, recording desktop collaborators.
"""

import pytest
import toml

from omnibar.actions.dispatcher import Executed, Failed, RequiresConfirmation
from omnibar.config import load_settings
from omnibar.errors import ConfigError, ConfirmationRequired
from omnibar.palette import create_palette
from omnibar.search.models import Category, CopyToClipboard, EmptyTrash, OpenApplication
from omnibar.search.provider import Provider
from omnibar.search.providers.applications import AppEntry

CATALOG = [
    AppEntry("safari", "Safari", "/Applications/Safari.app"),
    AppEntry("firefox", "Firefox", "/usr/bin/firefox"),
]


@pytest.fixture
def home(tmp_path):
    docs = tmp_path / "home" / "Documents"
    docs.mkdir(parents=True)
    (docs / "Safari Notes.txt").write_text("x")
    return tmp_path / "home"


@pytest.fixture
def palette(tmp_settings, tmp_commands, home, listener, system):
    settings = load_settings(tmp_settings)
    settings["files"]["roots"] = [str(home)]
    palette = create_palette(
        settings=settings,
        catalog=lambda: CATALOG,
        listener=listener,
        system=system,
        commands_path=tmp_commands,
    )
    yield palette
    palette.close()


class TestSearch:

    def test_weighted_categories_order_results(self, palette):
        results = palette.session.run_query("saf", timeout=5)
        titles = [r.title for r in results]

        # App at weight 1.0 (0.9) beats the file at weight 0.6 (0.54)
        assert titles.index("Safari") < titles.index("Safari Notes.txt")
        assert results[0].category == Category.APPLICATION

    def test_listener_sees_final_generation(self, palette, listener):
        palette.session.run_query("saf", timeout=5)
        generation, titles = listener.deliveries[-1]
        assert generation == 1
        assert titles[0] == "Safari"
        assert listener.reports[-1].failed == []

    def test_registry_is_frozen(self, palette):
        class Late(Provider):
            name = "late"

            def search(self, query, cancel):
                return []

        with pytest.raises(ConfigError):
            palette.registry.register(Late())

    def test_commands_are_searchable(self, palette):
        titles = [r.title for r in palette.session.run_query("!back", timeout=5)]
        assert "!backup" in titles

    def test_emoji_are_searchable(self, palette):
        results = palette.session.run_query(":fox", timeout=5)
        assert results[0].title == "🦊  Fox"
        assert results[0].action == CopyToClipboard("🦊")

    def test_max_results_from_settings(self, palette):
        assert len(palette.session.run_query("e", timeout=5)) <= 10


class TestDispatch:

    def test_empty_trash_handshake(self, palette, system, listener):
        trash = next(r for r in palette.session.run_query("empty trash", timeout=5)
                     if r.action == EmptyTrash())

        first = palette.dispatcher.dispatch(trash.action)
        assert isinstance(first, RequiresConfirmation)
        assert system.calls == []
        assert listener.prompts[-1].action == EmptyTrash()

        assert isinstance(palette.dispatcher.confirm_and_dispatch(trash.action), Executed)
        again = palette.dispatcher.confirm_and_dispatch(trash.action)
        assert isinstance(again, Failed)
        assert isinstance(again.error, ConfirmationRequired)
        assert system.calls == [("power", "EmptyTrash")]

    def test_open_application(self, palette, system):
        safari = palette.session.run_query("safari", timeout=5)[0]
        assert palette.dispatcher.dispatch(safari.action).ok
        assert system.calls == [("launch", "/Applications/Safari.app")]
        assert safari.action == OpenApplication("/Applications/Safari.app")


def test_palette_without_catalog_has_no_app_search(tmp_path, system):
    settings = load_settings(tmp_path / "missing.toml")
    settings["files"]["roots"] = [str(tmp_path)]
    (tmp_path / "commands.toml").write_text(toml.dumps({"commands": {}}))

    palette = create_palette(settings=settings, system=system,
                             commands_path=tmp_path / "commands.toml")
    try:
        assert "applications" not in palette.registry
        assert {"files", "system_actions", "calculator", "web_search", "commands", "emoji"} <= set(
            name for name, _ in palette.registry.items()
        )
    finally:
        palette.close()
