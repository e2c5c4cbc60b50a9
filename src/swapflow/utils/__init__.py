"""Utility modules for swapflow."""

from swapflow.utils.locks import LockTimeoutError, active_record_locks, get_record_lock, record_lock

__all__ = ["LockTimeoutError", "active_record_locks", "get_record_lock", "record_lock"]
