"""
Guest-to-user cart migration.

On login the server merges the guest cart into the user's cart when it sees
both the credential and the guest session id on the same request. The
client's only job is ordering: let subscribers re-fetch (carrying the
session id) before the session id is thrown away.

Sequencing is purely time-based. The coordinator never hears whether the
merge succeeded, and a failed merge does not bring the session id back.
"""

import asyncio
from typing import Set

from storefront.logging import get_logger
from storefront.notifier import CartChangeNotifier
from storefront.session import SessionIdentityProvider

logger = get_logger(__name__)

DEFAULT_REPULSE_DELAY = 0.5
DEFAULT_SETTLE_DELAY = 1.0


class MigrationCoordinator:
    """
    Sequences session id removal and cart change pulses around login/logout.

    Both operations must be called from inside a running event loop. They
    return the task running the delayed part of the sequence; callers may
    await it but do not have to. ``clear_local_cart`` is a coroutine because
    it removes the session id before returning.
    """

    def __init__(
        self,
        sessions: SessionIdentityProvider,
        notifier: CartChangeNotifier,
        repulse_delay: float = DEFAULT_REPULSE_DELAY,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ):
        self.sessions = sessions
        self.notifier = notifier
        self.repulse_delay = repulse_delay
        self.settle_delay = settle_delay
        self._tasks: Set[asyncio.Task] = set()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def clear_local_cart(self) -> asyncio.Task:
        """
        Drop the guest identity without merging (logout, user switch).

        The session id is gone before the first pulse, so every re-fetch
        already sees a fresh anonymous cart.
        """
        await self.sessions.clear_session_id()
        self.notifier.notify()
        logger.info("Local cart identity cleared")
        return self._spawn(self._repulse())

    async def _repulse(self) -> None:
        await asyncio.sleep(self.repulse_delay)
        self.notifier.notify()

    def trigger_cart_update(self) -> asyncio.Task:
        """
        Let the server merge the guest cart, then drop the guest identity.

        Pulse now, pulse again after ``repulse_delay``, and clear the session
        id ``settle_delay`` after the second pulse.
        """
        self.notifier.notify()
        logger.info("Cart merge requested, keeping guest session until it settles")
        return self._spawn(self._merge_then_forget())

    async def _merge_then_forget(self) -> None:
        await asyncio.sleep(self.repulse_delay)
        self.notifier.notify()
        await asyncio.sleep(self.settle_delay)
        await self.sessions.clear_session_id()
        logger.info("Guest cart session discarded after merge window")

    @property
    def pending(self) -> int:
        """Number of sequences still waiting on a timer."""
        return len(self._tasks)
