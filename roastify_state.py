"""
Roastify State Module
=====================
One explicit application state object plus a list of subscribers.

The orchestrators never talk to the terminal directly - they publish what
changed here, and whoever cares (the terminal app, the tests) subscribes.
Updates are applied on the event loop thread, so no locking is needed.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, List, Tuple

from roastify_options import RoastOptions


@dataclass(frozen=True)
class AppState:
    """Everything the UI would need to render a frame."""
    input_text: str = ""
    options: RoastOptions = field(default_factory=RoastOptions)
    attachment_names: Tuple[str, ...] = ()
    roasts: Tuple[str, ...] = ()
    is_generating: bool = False
    happy_visible: bool = False
    happy_state: str = "closed"
    happy_messages: Tuple[Tuple[str, str], ...] = ()
    happy_draft: str = ""
    is_speaking: bool = False


Listener = Callable[[AppState, AppState], None]


class RoastifyStore:
    """
    Holds the current AppState and notifies subscribers on every change.
    Listeners receive (old_state, new_state).
    """

    def __init__(self, initial: AppState = None):
        self._state = initial or AppState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A function that unsubscribes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes) -> AppState:
        """Apply changes and notify listeners (only if something actually changed)."""
        old = self._state
        new = replace(old, **changes)
        if new == old:
            return old

        self._state = new
        for listener in list(self._listeners):
            listener(old, new)
        return new
