"""Python client for the signage queue API."""

from signage.client.api_client import OperationResult, SignageApiClient
from signage.client.events import ChangeStreamListener, iter_change_events
from signage.client.kiosk import KioskWatcher
from signage.client.player import CallAnnouncer, DisplayPlayer
from signage.client.store import QueueStore, StoreSnapshot

__all__ = [
    "CallAnnouncer",
    "ChangeStreamListener",
    "DisplayPlayer",
    "KioskWatcher",
    "OperationResult",
    "QueueStore",
    "SignageApiClient",
    "StoreSnapshot",
    "iter_change_events",
]
