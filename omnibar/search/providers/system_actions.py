"""
System Actions Provider - Fixed catalog of panels, power and meeting actions.

Matches on title substring. Destructive entries (trash, power) produce
CRITICAL actions, so selecting them only ever yields a confirmation
prompt from the dispatcher.
"""

from typing import Iterator

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import (
    Action,
    Category,
    EmptyTrash,
    EnrollSpeaker,
    GenerateMeetingSummary,
    LockScreen,
    LogOut,
    OpenSystemPanel,
    Restart,
    Result,
    ShutDown,
    Sleep,
    StartMeeting,
    StopMeeting,
)
from omnibar.search.provider import Provider
from omnibar.search.scoring import relevance

# (title, subtitle, icon, action)
SYSTEM_ACTIONS: list[tuple[str, str, str, Action]] = [
    ("Settings", "Open system settings", "preferences-system", OpenSystemPanel("settings")),
    ("System Monitor", "Monitor system activity", "utilities-system-monitor", OpenSystemPanel("system-monitor")),
    ("Terminal", "Open a terminal", "utilities-terminal", OpenSystemPanel("terminal")),
    ("Files", "Open the file manager", "system-file-manager", OpenSystemPanel("files")),
    ("Empty Trash", "Permanently delete trashed files", "user-trash-full", EmptyTrash()),
    ("Sleep", "Put system to sleep", "system-suspend", Sleep()),
    ("Lock Screen", "Lock the screen", "system-lock-screen", LockScreen()),
    ("Log Out", "Log out current user", "system-log-out", LogOut()),
    ("Restart", "Restart the system", "system-reboot", Restart()),
    ("Shut Down", "Shut down the system", "system-shutdown", ShutDown()),
    ("Start Meeting", "Start recording a new meeting", "media-record", StartMeeting()),
    ("Stop Meeting", "Stop current meeting recording", "media-playback-stop", StopMeeting()),
    ("Meeting Summary", "Generate summary of current meeting", "x-office-document", GenerateMeetingSummary()),
    ("Enroll Speaker", "Add a new speaker profile", "contact-new", EnrollSpeaker()),
]


class SystemActionProvider(Provider):
    """Offer system panels, power controls and meeting controls."""

    name = "system_actions"

    def __init__(self, actions: list[tuple[str, str, str, Action]] | None = None):
        self.actions = actions if actions is not None else SYSTEM_ACTIONS

    def search(self, query: str, cancel: CancellationToken) -> Iterator[Result]:
        q = query.strip().lower()
        if not q:
            return

        for title, subtitle, icon, action in self.actions:
            if cancel.cancelled:
                return
            if q in title.lower():
                yield Result(
                    id=title,
                    title=title,
                    subtitle=subtitle,
                    icon=icon,
                    category=Category.SYSTEM_ACTION,
                    action=action,
                    relevance_score=relevance(title, query),
                )
