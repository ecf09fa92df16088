"""
Execution collaborators - The side effects behind each action.

SystemExecutor carries out application, file, URL, clipboard, panel and
power actions by spawning desktop tools (xdg-open, gtk-launch, wl-copy,
systemctl, loginctl, gio). Meeting control is external: hosts plug in a
MeetingController.

Collaborators signal failure by raising ExecutionFailed; the dispatcher
turns that into a Failed outcome.
"""

import getpass
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from omnibar.errors import ExecutionFailed
from omnibar.search.models import (
    Action,
    EmptyTrash,
    LockScreen,
    LogOut,
    Restart,
    ShutDown,
    Sleep,
)

DEFAULT_PANELS = {
    "settings": ["gnome-control-center"],
    "system-monitor": ["gnome-system-monitor"],
    "terminal": ["xdg-terminal-exec"],
    "files": ["xdg-open", str(Path.home())],
}

POWER_COMMANDS = {
    EmptyTrash: ["gio", "trash", "--empty"],
    Sleep: ["systemctl", "suspend"],
    LockScreen: ["loginctl", "lock-session"],
    LogOut: ["loginctl", "terminate-user", getpass.getuser()],
    Restart: ["systemctl", "reboot"],
    ShutDown: ["systemctl", "poweroff"],
}


class SystemController(ABC):
    """Desktop-side effects for informational and system-critical actions."""

    @abstractmethod
    def launch_application(self, path: str) -> None: ...

    @abstractmethod
    def open_file(self, path: str) -> None: ...

    @abstractmethod
    def open_url(self, url: str) -> None: ...

    @abstractmethod
    def copy_to_clipboard(self, text: str) -> None: ...

    @abstractmethod
    def open_system_panel(self, name: str) -> None: ...

    @abstractmethod
    def power(self, action: Action) -> None:
        """Sleep, lock, log out, restart, shut down or empty trash."""
        ...


class MeetingController(ABC):
    """Meeting assistant hooks. Implemented by the host application."""

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def generate_summary(self) -> None: ...

    @abstractmethod
    def enroll_speaker(self) -> None: ...


class SystemExecutor(SystemController):
    """SystemController backed by standard freedesktop command-line tools."""

    def __init__(self, panels: dict[str, list[str]] | None = None, power_timeout: float = 5.0):
        self.panels = panels or DEFAULT_PANELS
        self.power_timeout = power_timeout

    def launch_application(self, path: str) -> None:
        if path.endswith(".desktop"):
            self._spawn(["gtk-launch", Path(path).name])
        else:
            self._spawn([path])

    def open_file(self, path: str) -> None:
        if not Path(path).exists():
            raise ExecutionFailed(f"File not found: {path}")
        self._spawn(["xdg-open", path])

    def open_url(self, url: str) -> None:
        self._spawn(["xdg-open", url])

    def copy_to_clipboard(self, text: str) -> None:
        self._spawn(["wl-copy", text])

    def open_system_panel(self, name: str) -> None:
        argv = self.panels.get(name)
        if argv is None:
            raise ExecutionFailed(f"Unknown system panel: {name}")
        self._spawn(argv)

    def power(self, action: Action) -> None:
        argv = POWER_COMMANDS.get(type(action))
        if argv is None:
            raise ExecutionFailed(f"{action.description} is not a power action")
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.power_timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ExecutionFailed(f"{action.description} failed: {e}") from e

        if result.returncode != 0:
            raise ExecutionFailed(
                f"{action.description} failed: {result.stderr.strip() or f'exit {result.returncode}'}"
            )
        logger.info(f"Executed {action.description}")

    def _spawn(self, argv: list[str]) -> None:
        """Start a detached process; only a failure to start is reported."""
        try:
            subprocess.Popen(
                argv,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise ExecutionFailed(f"Could not run {argv[0]}: {e}") from e
        logger.debug(f"Spawned {argv[0]}")
