"""
Guest cart session identity.

A guest's cart is keyed by an opaque session id generated on the client and
kept in durable storage. The id is created lazily on the first cart call of
an unauthenticated visitor and removed only by the migration coordinator.
"""

import random
import string
from typing import Dict, Optional

from storefront.errors import StorageUnavailableError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.storage import Storage, StorageKeys

logger = get_logger(__name__)

_BASE36_DIGITS = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def _random_fragment() -> str:
    return _to_base36(random.getrandbits(52))


def generate_session_id(prefix: str = "session") -> str:
    """Build ``<prefix>-<frag>-<frag>`` from two independent random base-36 fragments."""
    return f"{prefix}-{_random_fragment()}-{_random_fragment()}"


class SessionIdentityProvider:
    """
    Produces and persists the anonymous cart session id.

    If storage fails, ids are kept for the lifetime of this provider only;
    the visitor keeps a working cart until the process ends.
    """

    def __init__(self, storage: Storage):
        self.storage = storage
        self._volatile: Dict[str, str] = {}

    # ==================== STORAGE HELPERS ====================

    async def _read(self, key: str) -> Optional[str]:
        try:
            value = await self.storage.get(key)
        except StorageUnavailableError as e:
            logger.warning(f"Session storage unavailable, using in-process value: {e}")
            return self._volatile.get(key)
        return value or None

    async def _write(self, key: str, value: str) -> None:
        try:
            await self.storage.set(key, value)
            self._volatile.pop(key, None)
        except StorageUnavailableError as e:
            logger.warning(f"Session id not persisted: {e}")
            self._volatile[key] = value

    async def _remove(self, key: str) -> None:
        self._volatile.pop(key, None)
        try:
            await self.storage.delete(key)
        except StorageUnavailableError as e:
            logger.warning(f"Session id not removed from storage: {e}")

    # ==================== CART SESSION ====================

    async def get_or_create_session_id(self) -> str:
        """Return the stored session id, creating and persisting one if absent."""
        session_id = await self._read(StorageKeys.CART_SESSION)
        if session_id:
            return session_id

        session_id = generate_session_id()
        await self._write(StorageKeys.CART_SESSION, session_id)
        logger.info(f"Created cart session {sanitize_id_for_logging(session_id)}")
        return session_id

    async def peek_session_id(self) -> Optional[str]:
        """Return the stored session id without creating one."""
        return await self._read(StorageKeys.CART_SESSION)

    async def clear_session_id(self) -> None:
        """Forget the session id; the next get_or_create call makes a new one."""
        await self._remove(StorageKeys.CART_SESSION)
        logger.info("Cart session cleared")

    # ==================== PER-STORE SESSIONS ====================

    async def get_or_create_store_session_id(self, store_id: int) -> str:
        """Session id dedicated to one store, so each store keeps its own cart."""
        key = StorageKeys.store_session_key(store_id)
        session_id = await self._read(key)
        if session_id:
            return session_id

        session_id = generate_session_id(prefix=f"store{store_id}-session")
        await self._write(key, session_id)
        logger.info(f"Created cart session for store {store_id}")
        return session_id

    async def get_all_store_sessions(self) -> Dict[int, str]:
        """Map of store id -> session id for every store the visitor has a cart in."""
        try:
            keys = await self.storage.keys(StorageKeys.STORE_SESSION)
        except StorageUnavailableError as e:
            logger.warning(f"Cannot list store sessions: {e}")
            keys = [k for k in self._volatile if k.startswith(StorageKeys.STORE_SESSION)]

        sessions: Dict[int, str] = {}
        for key in keys:
            suffix = key[len(StorageKeys.STORE_SESSION):]
            if not suffix.isdigit():
                continue
            session_id = await self._read(key)
            if session_id:
                sessions[int(suffix)] = session_id
        return sessions

    async def clear_store_session(self, store_id: int) -> None:
        await self._remove(StorageKeys.store_session_key(store_id))
        logger.info(f"Cart session for store {store_id} cleared")
