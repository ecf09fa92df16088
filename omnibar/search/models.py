"""
Result Model - Immutable value types shared by providers, ranker and dispatcher.

A Result is one candidate answer to a query. Its Action is a closed set of
frozen dataclasses; the ``kind`` class attribute decides how the dispatcher
treats it:

  INFORMATIONAL  → executed immediately (open, copy, search, custom)
  CRITICAL       → two-phase confirm before execution (power, empty trash)
  MEETING        → gated by the meeting state machine
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class Category(Enum):
    """Closed set of result categories."""
    APPLICATION = "application"
    FILE = "file"
    SYSTEM_ACTION = "systemAction"
    CALENDAR_EVENT = "calendarEvent"
    CLIPBOARD_ITEM = "clipboardItem"
    EMOJI = "emoji"
    ACTION = "action"
    SUGGESTION = "suggestion"

    @property
    def key(self) -> str:
        return self.value


@dataclass(frozen=True)
class CustomCategory:
    """Provider-defined category, e.g. CustomCategory("calculator")."""
    label: str

    @property
    def key(self) -> str:
        return f"custom:{self.label}"


ResultCategory = Union[Category, CustomCategory]


class ActionKind(Enum):
    INFORMATIONAL = "informational"
    CRITICAL = "critical"
    MEETING = "meeting"


@dataclass(frozen=True)
class Action:
    """Base for all action variants. Never instantiated directly."""

    kind: ClassVar[ActionKind] = ActionKind.INFORMATIONAL
    display_name: ClassVar[str] = "Action"

    @property
    def description(self) -> str:
        return self.display_name


# Informational actions

@dataclass(frozen=True)
class OpenApplication(Action):
    path: str
    display_name: ClassVar[str] = "Open Application"


@dataclass(frozen=True)
class OpenFile(Action):
    path: str
    display_name: ClassVar[str] = "Open File"


@dataclass(frozen=True)
class OpenURL(Action):
    url: str
    display_name: ClassVar[str] = "Open URL"


@dataclass(frozen=True)
class CopyToClipboard(Action):
    text: str
    display_name: ClassVar[str] = "Copy to Clipboard"


@dataclass(frozen=True)
class OpenSystemPanel(Action):
    """Open a named system panel (settings, system monitor, terminal, files)."""
    name: str
    display_name: ClassVar[str] = "Open System Panel"


@dataclass(frozen=True)
class PerformSearch(Action):
    """Chain into a refined search with a new query string."""
    query: str
    display_name: ClassVar[str] = "Perform Search"


@dataclass(frozen=True)
class CustomAction(Action):
    """Labeled command resolved through the CustomActionRegistry."""
    label: str
    display_name: ClassVar[str] = "Custom Action"

    @property
    def description(self) -> str:
        return self.label


# System-critical actions

@dataclass(frozen=True)
class EmptyTrash(Action):
    kind: ClassVar[ActionKind] = ActionKind.CRITICAL
    display_name: ClassVar[str] = "Empty Trash"


@dataclass(frozen=True)
class Sleep(Action):
    kind: ClassVar[ActionKind] = ActionKind.CRITICAL
    display_name: ClassVar[str] = "Sleep"


@dataclass(frozen=True)
class LockScreen(Action):
    kind: ClassVar[ActionKind] = ActionKind.CRITICAL
    display_name: ClassVar[str] = "Lock Screen"


@dataclass(frozen=True)
class LogOut(Action):
    kind: ClassVar[ActionKind] = ActionKind.CRITICAL
    display_name: ClassVar[str] = "Log Out"


@dataclass(frozen=True)
class Restart(Action):
    kind: ClassVar[ActionKind] = ActionKind.CRITICAL
    display_name: ClassVar[str] = "Restart"


@dataclass(frozen=True)
class ShutDown(Action):
    kind: ClassVar[ActionKind] = ActionKind.CRITICAL
    display_name: ClassVar[str] = "Shut Down"


# Meeting control actions

@dataclass(frozen=True)
class StartMeeting(Action):
    kind: ClassVar[ActionKind] = ActionKind.MEETING
    display_name: ClassVar[str] = "Start Meeting"


@dataclass(frozen=True)
class StopMeeting(Action):
    kind: ClassVar[ActionKind] = ActionKind.MEETING
    display_name: ClassVar[str] = "Stop Meeting"


@dataclass(frozen=True)
class GenerateMeetingSummary(Action):
    kind: ClassVar[ActionKind] = ActionKind.MEETING
    display_name: ClassVar[str] = "Generate Summary"


@dataclass(frozen=True)
class EnrollSpeaker(Action):
    kind: ClassVar[ActionKind] = ActionKind.MEETING
    display_name: ClassVar[str] = "Enroll Speaker"


@dataclass(frozen=True)
class Result:
    """A single candidate answer from any provider."""
    id: str
    title: str
    category: ResultCategory
    action: Action
    relevance_score: float = 0.0
    subtitle: Optional[str] = None
    icon: str = "image-missing"

    def __post_init__(self):
        if not 0.0 <= self.relevance_score <= 1.0:
            raise ValueError(
                f"relevance_score must be within [0.0, 1.0], got {self.relevance_score}"
            )
        if not isinstance(self.action, Action) or type(self.action) is Action:
            raise TypeError(f"Result '{self.id}' needs a concrete Action, got {self.action!r}")

    @property
    def dedup_key(self) -> tuple[str, str]:
        return self.category.key, self.id
