"""
Desktop Catalog - Installed applications from freedesktop .desktop entries.

Scans the XDG application directories once and caches the result. Entries
that are hidden, marked NoDisplay, or not of Type=Application are skipped;
the first entry found for a desktop ID wins, so user entries in
~/.local/share/applications shadow (or hide) system ones.
"""

import configparser
import os
import threading
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from omnibar.search.providers.applications import AppEntry

SECTION = "Desktop Entry"


def default_dirs() -> list[Path]:
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    return [Path(d) / "applications" for d in [data_home, *data_dirs.split(":")] if d]


class DesktopCatalog:
    """
    Callable application catalog for ApplicationProvider.

    Usage:
        catalog = DesktopCatalog()
        provider = ApplicationProvider(catalog)
    """

    def __init__(self, dirs: Optional[Iterable[str | Path]] = None):
        self.dirs = [Path(d).expanduser() for d in dirs] if dirs is not None else default_dirs()
        self._lock = threading.Lock()
        self._entries: Optional[list[AppEntry]] = None

    def __call__(self) -> list[AppEntry]:
        with self._lock:
            if self._entries is None:
                self._entries = self._scan()
            return self._entries

    def reload(self) -> None:
        with self._lock:
            self._entries = None

    def _scan(self) -> list[AppEntry]:
        # A skipped entry still shadows later ones with the same desktop ID
        entries: dict[str, Optional[AppEntry]] = {}
        for directory in self.dirs:
            if not directory.is_dir():
                continue
            for path in sorted(directory.glob("*.desktop")):
                if path.name not in entries:
                    entries[path.name] = self._parse(path)

        apps = sorted((app for app in entries.values() if app is not None), key=lambda app: app.name.lower())
        logger.debug(f"Loaded {len(apps)} applications from {len(self.dirs)} directories")
        return apps

    def _parse(self, path: Path) -> Optional[AppEntry]:
        parser = configparser.ConfigParser(interpolation=None, strict=False)
        # Keys such as Name[de] are case-sensitive
        parser.optionxform = str
        try:
            parser.read(path, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError, OSError) as e:
            logger.debug(f"Skipping unreadable desktop entry {path}: {e}")
            return None

        if not parser.has_section(SECTION):
            return None
        section = parser[SECTION]
        if section.get("Type", "Application") != "Application":
            return None
        if section.get("NoDisplay", "false").lower() == "true" or section.get("Hidden", "false").lower() == "true":
            return None
        name = section.get("Name")
        if not name:
            return None

        return AppEntry(
            id=path.name,
            name=name,
            path=str(path),
            description=section.get("Comment", ""),
            icon=section.get("Icon", "application-x-executable"),
        )
