"""Background services."""

from swapflow.services.confirmation_watcher import ConfirmationWatcher, receipt_status

__all__ = ["ConfirmationWatcher", "receipt_status"]
