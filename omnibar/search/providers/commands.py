"""
Command Provider - User-defined command aliases.

Reads command definitions from commands.toml and matches queries starting
with the "!" prefix. Each command is registered in the CustomActionRegistry
under "command:<name>", so results only carry the label.

Example commands.toml:
    [commands.backup]
    description = "Run backup script"
    exec = "~/bin/backup.sh"
    icon = "drive-harddisk"

Usage: !backup
"""

import subprocess
from pathlib import Path
from typing import Iterator

import toml
from loguru import logger

from omnibar.actions.custom import CustomActionRegistry
from omnibar.errors import ExecutionFailed
from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import CustomAction, CustomCategory, Result
from omnibar.search.provider import Provider
from omnibar.search.scoring import relevance

COMMAND = CustomCategory("command")
DEFAULT_COMMANDS_PATH = Path.home() / ".config" / "omnibar" / "commands.toml"


def load_commands(path: Path | str) -> dict:
    """Load and validate commands from a TOML file; malformed entries are skipped."""
    path = Path(path)
    if not path.exists():
        return {}

    try:
        data = toml.load(path)
    except (OSError, toml.TomlDecodeError):
        logger.exception(f"Failed to load commands from {path}")
        return {}

    commands = data.get("commands", {})
    for name, cmd in list(commands.items()):
        if not isinstance(cmd, dict) or "exec" not in cmd:
            logger.warning(f"Skipping malformed command '{name}': missing 'exec' field")
            del commands[name]
    return commands


class CommandProvider(Provider):
    """Run user-defined commands via '!' prefix."""

    name = "commands"

    def __init__(self, commands: dict, registry: CustomActionRegistry):
        self.commands = commands
        for cmd_name, cmd in commands.items():
            registry.register(self.label_for(cmd_name), lambda c=cmd: self._execute(c))

    @classmethod
    def from_file(cls, registry: CustomActionRegistry, path: Path | str = DEFAULT_COMMANDS_PATH) -> "CommandProvider":
        return cls(load_commands(path), registry)

    @staticmethod
    def label_for(name: str) -> str:
        return f"command:{name}"

    def search(self, query: str, cancel: CancellationToken) -> Iterator[Result]:
        q = query.strip()
        if not q.startswith("!"):
            return
        q = q.lstrip("!").strip().lower()

        for name, cmd in sorted(self.commands.items()):
            if cancel.cancelled:
                return
            if not q:
                # Bare "!" lists everything
                yield self._to_result(name, cmd, 0.5)
            elif q in name.lower() or q in cmd.get("description", "").lower():
                yield self._to_result(name, cmd, max(relevance(name, q), 0.6))

    def _to_result(self, name: str, cmd: dict, score: float) -> Result:
        return Result(
            id=name,
            title=f"!{name}",
            subtitle=cmd.get("description", ""),
            icon=cmd.get("icon", "utilities-terminal"),
            category=COMMAND,
            action=CustomAction(self.label_for(name)),
            relevance_score=score,
        )

    def _execute(self, cmd: dict) -> None:
        exec_str = cmd["exec"]
        try:
            subprocess.Popen(
                exec_str,
                shell=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise ExecutionFailed(f"Failed to execute command: {exec_str}: {e}") from e
