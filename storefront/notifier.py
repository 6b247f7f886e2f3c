"""Cart change broadcast.

A pulse says "the authoritative cart may have changed, re-pull it". It
carries no payload and gives no ordering guarantee relative to the fetches
it triggers; several pulses may coalesce on the subscriber side.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, List, Set, Union

from storefront.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[], Union[None, Awaitable[Any]]]


class CartChangeNotifier:
    """Fan-out of payload-free cart change pulses."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._pending: Set[asyncio.Task] = set()
        self.pulse_count = 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        """Pulse every subscriber. Coroutine listeners are scheduled, not awaited."""
        self.pulse_count += 1
        for listener in list(self._listeners):
            try:
                result = listener()
            except Exception as e:
                logger.warning(f"Cart listener {listener!r} failed: {e}", exc_info=True)
                continue

            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._on_listener_done)

    def _on_listener_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Cart listener failed: {error}", exc_info=error)

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)
