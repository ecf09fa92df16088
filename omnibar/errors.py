"""
Error taxonomy for the Omnibar core.

Provider-level errors are recorded and logged by the aggregator but never
abort a generation. Dispatch-level errors are returned inside a
``Failed`` outcome rather than raised to the presentation layer.
"""


class OmnibarError(Exception):
    """Base class for all Omnibar errors."""


class ConfigError(OmnibarError):
    """Invalid settings or registry misuse."""


class ProviderError(OmnibarError):
    """A provider raised while producing results for a query."""

    def __init__(self, provider: str, cause: BaseException):
        super().__init__(f"Provider '{provider}' failed: {cause}")
        self.provider = provider
        self.cause = cause


class ProviderTimeout(OmnibarError):
    """A provider did not finish within its time budget."""

    def __init__(self, provider: str, timeout: float):
        super().__init__(f"Provider '{provider}' timed out after {timeout * 1000:.0f}ms")
        self.provider = provider
        self.timeout = timeout


class DispatchError(OmnibarError):
    """Base class for errors reported by the dispatcher."""


class InvalidState(DispatchError):
    """A meeting action was dispatched out of order."""

    def __init__(self, action, state):
        super().__init__(f"{action.description} is not valid while {state.value}")
        self.action = action
        self.state = state


class ConfirmationRequired(DispatchError):
    """A destructive action was confirmed without a live pending confirmation."""

    def __init__(self, action):
        super().__init__(f"{action.description} requires confirmation")
        self.action = action


class ExecutionFailed(DispatchError):
    """The execution collaborator failed to carry out an action."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class UnknownAction(DispatchError):
    """No behavior is registered for a custom action label."""

    def __init__(self, label: str):
        super().__init__(f"No behavior registered for custom action '{label}'")
        self.label = label
