import json
import logging
from collections.abc import Iterable, Iterator
from typing import Any

import httpx

from signage.client.api_client import CONFIGURATION_MESSAGE, OperationResult, SignageApiClient
from signage.client.store import QueueStore

logger = logging.getLogger(__name__)


def iter_change_events(lines: Iterable[str]) -> Iterator[dict[str, Any]]:
    """Parse a server-sent event stream, yielding the payload of each ``change`` event."""
    event_name = "message"
    data_lines: list[str] = []
    for line in lines:
        if not line:
            if event_name == "change" and data_lines:
                yield json.loads("\n".join(data_lines))
            event_name = "message"
            data_lines = []
        elif line.startswith("event:"):
            event_name = line[len("event:") :].strip()
        elif line.startswith("data:"):
            data_lines.append(line[len("data:") :].strip())


class ChangeStreamListener:
    """Refreshes the store after every change notification from the backend."""

    def __init__(self, api: SignageApiClient, store: QueueStore, table: str = "*") -> None:
        self.api = api
        self.store = store
        self.table = table

    def run(self, max_events: int | None = None) -> OperationResult:
        """Follow the stream until it ends or ``max_events`` changes were handled.

        ``data`` holds the number of handled changes, also when the stream fails.
        """
        if not self.api.base_url:
            logger.error("Signage API base URL is not configured")
            return OperationResult(success=False, message=CONFIGURATION_MESSAGE, data=0)

        handled = 0
        timeout = httpx.Timeout(self.api.timeout_seconds, read=None)
        try:
            with self.api.http_client(timeout=timeout) as client:
                with client.stream("GET", "/events", params={"table": self.table}) as response:
                    response.raise_for_status()
                    for event in iter_change_events(response.iter_lines()):
                        logger.debug("Change on %s: %s", event.get("table"), event.get("event"))
                        self.store.refresh()
                        handled += 1
                        if max_events is not None and handled >= max_events:
                            break
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("Change stream for %s returned %d", self.table, status_code)
            return OperationResult(
                success=False,
                message=f"Change stream rejected with status {status_code}.",
                data=handled,
                status_code=status_code,
            )
        except httpx.HTTPError as exc:
            logger.warning("Change stream for %s failed: %s", self.table, exc)
            return OperationResult(
                success=False,
                message=f"Could not reach the server: {exc}",
                data=handled,
            )
        except ValueError as exc:
            logger.warning("Malformed change event on %s: %s", self.table, exc)
            return OperationResult(success=False, message="Malformed change event.", data=handled)
        return OperationResult(success=True, data=handled)
