"""Per-key write locks for the swap record store.

Writes for the same transaction or order hash are serialized; writes for
different keys never wait on each other. A key's lock is dropped from the
registry once no writer holds or waits for it.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

logger = logging.getLogger(__name__)

# Lock registry: record key -> asyncio.Lock
_record_locks: dict[str, asyncio.Lock] = {}
# Writers holding or waiting for each key's lock
_lock_users: dict[str, int] = {}
_registry_lock = asyncio.Lock()


class LockTimeoutError(Exception):
    """Raised when a record lock cannot be acquired within the timeout period."""

    pass


async def get_record_lock(key: str) -> asyncio.Lock:
    """Get or create the lock for a record key.

    Keys are compared case-insensitively since hashes arrive in mixed case.
    """
    key = key.lower()
    async with _registry_lock:
        if key not in _record_locks:
            _record_locks[key] = asyncio.Lock()
        return _record_locks[key]


async def _checkout(key: str) -> asyncio.Lock:
    async with _registry_lock:
        lock = _record_locks.setdefault(key, asyncio.Lock())
        _lock_users[key] = _lock_users.get(key, 0) + 1
        return lock


async def _checkin(key: str, lock: asyncio.Lock) -> None:
    async with _registry_lock:
        users = _lock_users.get(key, 1) - 1
        if users > 0:
            _lock_users[key] = users
            return
        _lock_users.pop(key, None)
        if not lock.locked() and _record_locks.get(key) is lock:
            del _record_locks[key]


@asynccontextmanager
async def record_lock(
    key: str,
    timeout: Optional[float] = 30.0,
    operation: str = "record_write",
) -> AsyncIterator[None]:
    """Hold the write lock for one record key.

    Example:
        async with record_lock(tx_hash, operation="add_transaction"):
            await repo.add_transaction(...)
    """
    key = key.lower()
    lock = await _checkout(key)
    try:
        try:
            if timeout:
                await asyncio.wait_for(lock.acquire(), timeout=timeout)
            else:
                await lock.acquire()
        except asyncio.TimeoutError:
            logger.warning(f"Lock timeout for record {key} after {timeout}s: {operation}")
            raise LockTimeoutError(f"Could not acquire lock for record {key} within {timeout}s")

        logger.debug(f"Lock acquired for record {key}: {operation}")
        try:
            yield
        finally:
            lock.release()
            logger.debug(f"Lock released for record {key}: {operation}")
    finally:
        await _checkin(key, lock)


def active_record_locks() -> int:
    """Number of keys with a registered lock."""
    return len(_record_locks)


def clear_record_locks() -> None:
    """Clear all record locks (useful for testing)."""
    _record_locks.clear()
    _lock_users.clear()
