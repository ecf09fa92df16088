"""
Shared test fixtures for the Omnibar test suite.

Provides temporary database, settings and commands files that use real
file I/O (no mocking of the filesystem), plus recording collaborators for
the presentation layer and the desktop side effects.
"""

import sqlite3
import threading

import pytest
import toml

from omnibar.actions.executors import MeetingController, SystemController
from omnibar.search.models import Category, OpenApplication, Result
from omnibar.search.session import ResultListener


@pytest.fixture
def tmp_db(tmp_path):
    """Create a real SQLite database with FrecencyService-compatible schema."""
    db_path = tmp_path / "app_usage.db"
    conn = sqlite3.connect(str(db_path))
    conn.execute("""
        CREATE TABLE IF NOT EXISTS app_stats (
            app_id TEXT PRIMARY KEY,
            launch_count INTEGER DEFAULT 0,
            last_launch INTEGER,
            created_at INTEGER
        )
    """)
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "aggregator": {"provider_timeout_ms": 250, "timeouts": {"files": 800}},
        "ranking": {"max_results": 10, "weights": {"application": 1.0, "file": 0.6}},
        "dispatcher": {"confirmation_ttl_s": 5},
        "search": {"max_results": 15},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path


@pytest.fixture
def tmp_commands(tmp_path):
    """Create a real commands TOML file with test entries."""
    commands_path = tmp_path / "commands.toml"
    data = {
        "commands": {
            "backup": {
                "description": "Run backup script",
                "exec": "echo backup",
                "icon": "drive-harddisk",
            },
            "notes": {
                "description": "Open scratch notes",
                "exec": "echo notes",
            },
        }
    }
    commands_path.write_text(toml.dumps(data))
    return commands_path


class RecordingListener(ResultListener):
    """Presentation stand-in that records every hook call."""

    def __init__(self):
        self.deliveries = []
        self.reports = []
        self.prompts = []
        self.done = threading.Event()

    def on_results(self, generation, results):
        self.deliveries.append((generation, [r.title for r in results]))

    def on_complete(self, report):
        self.reports.append(report)
        self.done.set()

    def on_confirmation_required(self, pending):
        self.prompts.append(pending)


class RecordingSystem(SystemController):
    """SystemController that records calls instead of touching the desktop."""

    def __init__(self, fail_with=None):
        self.calls = []
        self.fail_with = fail_with

    def _record(self, *call):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append(call)

    def launch_application(self, path):
        self._record("launch", path)

    def open_file(self, path):
        self._record("open_file", path)

    def open_url(self, url):
        self._record("open_url", url)

    def copy_to_clipboard(self, text):
        self._record("copy", text)

    def open_system_panel(self, name):
        self._record("panel", name)

    def power(self, action):
        self._record("power", type(action).__name__)


class RecordingMeetings(MeetingController):
    def __init__(self, fail_with=None):
        self.calls = []
        self.fail_with = fail_with

    def _record(self, name):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append(name)

    def start(self):
        self._record("start")

    def stop(self):
        self._record("stop")

    def generate_summary(self):
        self._record("summary")

    def enroll_speaker(self):
        self._record("enroll")


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def system():
    return RecordingSystem()


@pytest.fixture
def meetings():
    return RecordingMeetings()


def make_result(id, title=None, score=0.5, category=Category.APPLICATION, action=None):
    """Build a Result with sensible defaults for ranking tests."""
    return Result(
        id=id,
        title=title or id,
        category=category,
        action=action or OpenApplication(f"/apps/{id}"),
        relevance_score=score,
    )


@pytest.fixture
def result_factory():
    return make_result
