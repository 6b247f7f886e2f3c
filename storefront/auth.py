"""
Credential presence and the guest/user identity handoff.

Authentication itself (login forms, token issuance) happens elsewhere; this
module only stores the bearer token it is handed and tells the migration
coordinator what to do with the guest cart.
"""

import asyncio
from typing import Optional

from storefront.errors import StorageUnavailableError
from storefront.logging import get_logger
from storefront.migration import MigrationCoordinator
from storefront.storage import Storage, StorageKeys

logger = get_logger(__name__)


class AuthSession:
    """Reads and writes ``auth_token`` and drives cart migration on login/logout."""

    def __init__(self, storage: Storage, coordinator: Optional[MigrationCoordinator] = None):
        self.storage = storage
        self.coordinator = coordinator

    async def get_token(self) -> Optional[str]:
        """Current bearer token, or None. An empty string counts as no token."""
        try:
            token = await self.storage.get(StorageKeys.AUTH_TOKEN)
        except StorageUnavailableError as e:
            logger.warning(f"Cannot read auth token: {e}")
            return None
        return token or None

    async def is_authenticated(self) -> bool:
        return await self.get_token() is not None

    async def sign_in(self, token: str, merge_cart: bool = True) -> Optional[asyncio.Task]:
        """
        Store ``token`` and hand the guest cart over to the user.

        With ``merge_cart`` the guest session id is kept until the merge
        window has passed; without it the guest cart is abandoned at once.
        """
        if not token:
            raise ValueError("token must be a non-empty string")
        await self.storage.set(StorageKeys.AUTH_TOKEN, token)
        logger.info("Signed in")

        if self.coordinator is None:
            return None
        if merge_cart:
            return self.coordinator.trigger_cart_update()
        return await self.coordinator.clear_local_cart()

    async def sign_out(self) -> Optional[asyncio.Task]:
        """Forget the token and start over with a fresh anonymous cart."""
        await self.storage.delete(StorageKeys.AUTH_TOKEN)
        logger.info("Signed out")

        if self.coordinator is None:
            return None
        return await self.coordinator.clear_local_cart()
