"""
Dispatcher - Executes the action attached to a selected result.

Policies by action kind:
  - INFORMATIONAL: delegated to a collaborator, reports Executed or Failed.
  - CRITICAL: two-phase. dispatch() only records a PendingConfirmation;
    confirm_and_dispatch() consumes it and executes exactly once.
  - MEETING: gated by an IDLE / IN_MEETING state machine. Out-of-order
    actions fail with InvalidState and never reach the controller.

Failures are returned inside the outcome, never raised.
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from omnibar.actions.custom import CustomActionRegistry
from omnibar.actions.executors import MeetingController, SystemController, SystemExecutor
from omnibar.errors import (
    ConfirmationRequired,
    DispatchError,
    ExecutionFailed,
    InvalidState,
    UnknownAction,
)
from omnibar.search.models import (
    Action,
    ActionKind,
    CopyToClipboard,
    CustomAction,
    EnrollSpeaker,
    GenerateMeetingSummary,
    OpenApplication,
    OpenFile,
    OpenSystemPanel,
    OpenURL,
    PerformSearch,
    StartMeeting,
    StopMeeting,
)

DEFAULT_CONFIRMATION_TTL = 10.0


class MeetingState(Enum):
    IDLE = "idle"
    IN_MEETING = "in meeting"


# action type → (states it is valid in, state after success or None to keep)
MEETING_TRANSITIONS = {
    StartMeeting: ({MeetingState.IDLE}, MeetingState.IN_MEETING),
    StopMeeting: ({MeetingState.IN_MEETING}, MeetingState.IDLE),
    GenerateMeetingSummary: ({MeetingState.IN_MEETING}, None),
    EnrollSpeaker: ({MeetingState.IDLE, MeetingState.IN_MEETING}, None),
}


@dataclass(frozen=True)
class PendingConfirmation:
    """A destructive action awaiting explicit confirmation until ``expiry``."""
    action: Action
    expiry: float

    def expired(self, now: float) -> bool:
        return now >= self.expiry


@dataclass(frozen=True)
class DispatchOutcome:
    action: Action

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class Executed(DispatchOutcome):
    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class RequiresConfirmation(DispatchOutcome):
    pending: PendingConfirmation


@dataclass(frozen=True)
class Failed(DispatchOutcome):
    error: DispatchError

    @property
    def reason(self) -> str:
        return str(self.error)


class Dispatcher:
    """Thread-safe action dispatcher shared by the whole palette."""

    def __init__(
        self,
        system: Optional[SystemController] = None,
        meetings: Optional[MeetingController] = None,
        custom: Optional[CustomActionRegistry] = None,
        search: Optional[Callable[[str], object]] = None,
        listener=None,
        frecency=None,
        confirmation_ttl: float = DEFAULT_CONFIRMATION_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.system = system if system is not None else SystemExecutor()
        self.meetings = meetings
        self.custom = custom if custom is not None else CustomActionRegistry()
        self.search = search
        self.listener = listener
        self.frecency = frecency
        self.confirmation_ttl = confirmation_ttl
        self._clock = clock

        self._lock = threading.Lock()
        self._pending: Optional[PendingConfirmation] = None
        self._meeting_lock = threading.Lock()
        self._meeting_state = MeetingState.IDLE

        self._informational = {
            OpenApplication: lambda a: self.system.launch_application(a.path),
            OpenFile: lambda a: self.system.open_file(a.path),
            OpenURL: lambda a: self.system.open_url(a.url),
            CopyToClipboard: lambda a: self.system.copy_to_clipboard(a.text),
            OpenSystemPanel: lambda a: self.system.open_system_panel(a.name),
            PerformSearch: self._perform_search,
            CustomAction: lambda a: self.custom.run(a.label),
        }

    @property
    def meeting_state(self) -> MeetingState:
        return self._meeting_state

    @property
    def pending(self) -> Optional[PendingConfirmation]:
        return self._pending

    def dispatch(self, action: Action) -> DispatchOutcome:
        """Execute ``action``, or ask for confirmation if it is destructive."""
        with self._lock:
            if self._pending is not None and self._pending.action != action:
                logger.debug(f"Discarding pending confirmation for {self._pending.action.description}")
                self._pending = None

            if action.kind is ActionKind.CRITICAL:
                pending = PendingConfirmation(action, self._clock() + self.confirmation_ttl)
                self._pending = pending

        if action.kind is ActionKind.CRITICAL:
            logger.debug(f"{action.description} awaiting confirmation")
            if self.listener is not None:
                self.listener.on_confirmation_required(pending)
            return RequiresConfirmation(action, pending)

        if action.kind is ActionKind.MEETING:
            return self._dispatch_meeting(action)

        return self._execute(action, self._informational[type(action)])

    def confirm_and_dispatch(self, action: Action) -> DispatchOutcome:
        """
        Execute a destructive action previously returned as RequiresConfirmation.

        The pending confirmation is consumed before execution, so repeating
        this call without a new dispatch() fails with ConfirmationRequired.
        """
        if action.kind is not ActionKind.CRITICAL:
            return self.dispatch(action)

        with self._lock:
            pending, self._pending = self._pending, None

        if pending is None or pending.action != action or pending.expired(self._clock()):
            logger.warning(f"Refused unconfirmed {action.description}")
            return Failed(action, ConfirmationRequired(action))

        return self._execute(action, self.system.power)

    def dispatch_with_prompt(
        self,
        action: Action,
        confirm: Callable[[PendingConfirmation], bool],
    ) -> DispatchOutcome:
        """
        Full confirmation handshake in one call.

        ``confirm`` is the presentation prompt; it may block until the user
        answers. A refusal, or an answer after the expiry, executes nothing.
        """
        outcome = self.dispatch(action)
        if not isinstance(outcome, RequiresConfirmation):
            return outcome

        if not confirm(outcome.pending):
            self.cancel_confirmation()
            return Failed(action, ConfirmationRequired(action))
        return self.confirm_and_dispatch(action)

    def cancel_confirmation(self) -> None:
        with self._lock:
            self._pending = None

    def _dispatch_meeting(self, action: Action) -> DispatchOutcome:
        valid_from, next_state = MEETING_TRANSITIONS[type(action)]

        with self._meeting_lock:
            state = self._meeting_state
            if state not in valid_from:
                logger.warning(f"{action.description} rejected while {state.value}")
                return Failed(action, InvalidState(action, state))

            outcome = self._execute(action, self._meeting_call)
            if outcome.ok and next_state is not None:
                self._meeting_state = next_state
                logger.debug(f"Meeting state {state.value} -> {next_state.value}")
            return outcome

    def _meeting_call(self, action: Action) -> None:
        if self.meetings is None:
            raise ExecutionFailed("No meeting controller configured")
        calls = {
            StartMeeting: self.meetings.start,
            StopMeeting: self.meetings.stop,
            GenerateMeetingSummary: self.meetings.generate_summary,
            EnrollSpeaker: self.meetings.enroll_speaker,
        }
        calls[type(action)]()

    def _perform_search(self, action: PerformSearch) -> None:
        if self.search is None:
            raise ExecutionFailed("No query session attached")
        self.search(action.query)

    def _execute(self, action: Action, effect: Callable[[Action], None]) -> DispatchOutcome:
        try:
            effect(action)
        except (ExecutionFailed, UnknownAction) as e:
            logger.warning(f"{action.description} failed: {e}")
            return Failed(action, e)
        except Exception as e:
            logger.exception(f"{action.description} raised unexpectedly")
            return Failed(action, ExecutionFailed(str(e)))

        if isinstance(action, OpenApplication) and self.frecency is not None:
            self.frecency.record_launch(action.path)

        logger.debug(f"Executed {action.description}")
        return Executed(action)
