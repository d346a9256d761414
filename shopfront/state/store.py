# shopfront/state/store.py

"""Observable reducer base shared by the auth, catalog and cart state."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

S = TypeVar("S")
E = TypeVar("E")

Listener = Callable[[S], None]


class Reducer(ABC, Generic[S, E]):
    """Holds one immutable state snapshot and replaces it per event.

    Events are applied one at a time: ``dispatch`` holds a per-reducer
    lock for the whole transition, network wait included, so a second
    event for the same reducer waits for the first to finish. Other
    reducers are unaffected.

    Subscribers are called with every published snapshot.
    """

    name: str = "state"

    def __init__(self, initial: S) -> None:
        self.logger = logging.getLogger(f"shopfront.{self.name}")
        self._state: S = initial
        self._listeners: list[Listener[S]] = []
        self._dispatch_lock = asyncio.Lock()

    @property
    def state(self) -> S:
        """The current snapshot."""
        return self._state

    def subscribe(self, listener: Listener[S]) -> Callable[[], None]:
        """Register ``listener`` and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def dispatch(self, event: E) -> S:
        """Apply ``event`` and return the resulting snapshot."""
        async with self._dispatch_lock:
            self.logger.debug("Dispatching %s", type(event).__name__)
            new_state = await self._reduce(self._state, event)
            self._publish(new_state)
            return new_state

    def _publish(self, state: S) -> None:
        """Replace the snapshot and notify every subscriber."""
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                self.logger.error(
                    "Subscriber %r raised while handling %s",
                    listener,
                    type(state).__name__,
                    exc_info=True,
                )

    @abstractmethod
    async def _reduce(self, state: S, event: E) -> S:
        """Compute the snapshot that follows ``event``."""
        ...
