"""
Durable client storage.

Key/value persistence for client-local state that must survive restarts:
the guest cart session id (``cart_session_id``), per-store session ids and
the bearer credential (``auth_token``).

Backends:
- MemoryStorage: process-lifetime only (tests, throwaway sessions)
- FileStorage: JSON file on disk (single desktop/CLI client)
- RedisStorage: Upstash Redis, shared by several client processes

No compare-and-swap is offered: two processes creating a session id at the
same moment may each create their own.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from storefront.config import Settings, get_settings
from storefront.errors import StorageUnavailableError
from storefront.logging import get_logger

logger = get_logger(__name__)


class StorageKeys:
    """Storage keys for client-local state."""

    CART_SESSION = "cart_session_id"
    AUTH_TOKEN = "auth_token"
    STORE_SESSION = "cart_session_store_"  # cart_session_store_{store_id}

    @staticmethod
    def store_session_key(store_id: int) -> str:
        return f"{StorageKeys.STORE_SESSION}{store_id}"


class Storage:
    """Async key/value interface. Implementations raise StorageUnavailableError."""

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def keys(self, prefix: str = "") -> List[str]:
        raise NotImplementedError


class MemoryStorage(Storage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self, prefix: str = "") -> List[str]:
        return [k for k in self._data if k.startswith(prefix)]


class FileStorage(Storage):
    """
    JSON-file storage.

    The file is re-read on every access so that several clients sharing the
    file see each other's writes (last writer wins). Disk access runs in a
    worker thread.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StorageUnavailableError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageUnavailableError(f"Unexpected content in {self.path}")
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write {self.path}: {e}") from e

    def _update(self, key: str, value: Optional[str]) -> None:
        data = self._load()
        if value is None:
            if key not in data:
                return
            del data[key]
        else:
            data[key] = value
        self._save(data)

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._load)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._update, key, None)

    async def keys(self, prefix: str = "") -> List[str]:
        data = await asyncio.to_thread(self._load)
        return [k for k in data if k.startswith(prefix)]


class RedisStorage(Storage):
    """Upstash Redis storage (async REST client); keys are namespaced with ``prefix``."""

    def __init__(self, client: AsyncRedis, prefix: str = "storefront:"):
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(self._key(key))
        except Exception as e:
            logger.error(f"Failed to read {key} from Redis: {e}")
            raise StorageUnavailableError(f"Redis read failed: {e}") from e
        return None if value is None else str(value)

    async def set(self, key: str, value: str) -> None:
        try:
            await self.client.set(self._key(key), value)
        except Exception as e:
            logger.error(f"Failed to write {key} to Redis: {e}")
            raise StorageUnavailableError(f"Redis write failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except Exception as e:
            logger.error(f"Failed to delete {key} from Redis: {e}")
            raise StorageUnavailableError(f"Redis delete failed: {e}") from e

    async def keys(self, prefix: str = "") -> List[str]:
        try:
            found = await self.client.keys(f"{self._key(prefix)}*")
        except Exception as e:
            logger.error(f"Failed to list keys from Redis: {e}")
            raise StorageUnavailableError(f"Redis keys failed: {e}") from e
        return [k[len(self.prefix):] for k in found]


def create_storage(settings: Settings) -> Storage:
    """
    Pick the storage backend for ``settings``.

    Priority: Upstash Redis (both REST vars set) > JSON file > memory.
    """
    if settings.use_redis:
        return RedisStorage(AsyncRedis(url=settings.redis_url, token=settings.redis_token))
    if settings.storage_path:
        return FileStorage(settings.storage_path)
    logger.info("No durable storage configured, session ids last for this process only")
    return MemoryStorage()


# Singleton instance
_storage: Optional[Storage] = None


def get_storage() -> Storage:
    """Get process-wide storage (singleton)."""
    global _storage
    if _storage is None:
        _storage = create_storage(get_settings())
    return _storage
