"""
Actions package - Dispatch of the side effect attached to a result.
"""

from .custom import CustomActionRegistry
from .dispatcher import (
    DispatchOutcome,
    Dispatcher,
    Executed,
    Failed,
    MeetingState,
    PendingConfirmation,
    RequiresConfirmation,
)
from .executors import MeetingController, SystemController, SystemExecutor

__all__ = [
    "CustomActionRegistry",
    "DispatchOutcome",
    "Dispatcher",
    "Executed",
    "Failed",
    "MeetingController",
    "MeetingState",
    "PendingConfirmation",
    "RequiresConfirmation",
    "SystemController",
    "SystemExecutor",
]
