"""
Cooperative cancellation tokens.

Every provider call receives a token bound to one query generation. When
the generation is superseded the session cancels its token, which cancels
every child handed out to providers. Providers poll ``cancelled`` between
units of work; nothing is interrupted forcibly.
"""

import threading


class CancellationToken:
    """Thread-safe, one-way cancellation flag with child propagation."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list["CancellationToken"] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel this token and all of its children. Idempotent."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            children, self._children = self._children, []

        for child in children:
            child.cancel()

    def child(self) -> "CancellationToken":
        """
        Create a token that is cancelled when this one is.

        The child can also be cancelled on its own (e.g. when a single
        provider times out) without affecting the parent.
        """
        token = CancellationToken()
        with self._lock:
            if not self._event.is_set():
                self._children.append(token)
                return token
        token.cancel()
        return token

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or timeout. Returns True if cancelled."""
        return self._event.wait(timeout)

    def __repr__(self):
        state = "cancelled" if self.cancelled else "active"
        return f"<CancellationToken {state}>"
