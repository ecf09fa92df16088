"""
Custom action registry - label → behavior for CustomAction results.

Providers that mint CustomAction(label) results register the behavior
behind each label here, so dispatch stays a lookup rather than arbitrary
dynamic code carried on the result.
"""

import threading
from typing import Callable

from loguru import logger

from omnibar.errors import UnknownAction


class CustomActionRegistry:
    """Thread-safe mapping of custom action labels to callables."""

    def __init__(self):
        self._behaviors: dict[str, Callable[[], None]] = {}
        self._lock = threading.Lock()

    def register(self, label: str, behavior: Callable[[], None]) -> None:
        """Register or replace the behavior for a label."""
        with self._lock:
            if label in self._behaviors:
                logger.debug(f"Replacing behavior for custom action '{label}'")
            self._behaviors[label] = behavior

    def unregister(self, label: str) -> None:
        with self._lock:
            self._behaviors.pop(label, None)

    def run(self, label: str) -> None:
        """Run the behavior for ``label``; raises UnknownAction if none."""
        with self._lock:
            behavior = self._behaviors.get(label)
        if behavior is None:
            raise UnknownAction(label)
        behavior()

    def __contains__(self, label: str) -> bool:
        with self._lock:
            return label in self._behaviors
