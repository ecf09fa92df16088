"""
Built-in providers - Result sources shipped with the core.

Each provider streams Results for every query; hosts register the ones
they want alongside their own (calendar, clipboard history, ...).
"""

from .applications import AppEntry, ApplicationProvider
from .calculator import CalculatorProvider
from .commands import CommandProvider
from .emoji import EmojiProvider
from .files import FileProvider
from .system_actions import SystemActionProvider
from .web_search import WebSearchProvider

__all__ = [
    "AppEntry",
    "ApplicationProvider",
    "CalculatorProvider",
    "CommandProvider",
    "EmojiProvider",
    "FileProvider",
    "SystemActionProvider",
    "WebSearchProvider",
]
