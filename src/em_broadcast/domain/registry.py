"""Connected-client registry for the live order book.

One ClientStream per connected client, created on connect and removed on
disconnect. Streams share nothing with each other.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ClientStream:
    client_id: str
    queue: asyncio.Queue[dict[str, Any]]
    stop: asyncio.Event = field(default_factory=asyncio.Event)
    task: asyncio.Task[None] | None = None

    def offer(self, event: dict[str, Any]) -> None:
        """Enqueue without blocking; a full queue sheds its oldest event."""
        if self.stop.is_set():
            return
        while True:
            try:
                self.queue.put_nowait(event)
                return
            except asyncio.QueueFull:
                try:
                    self.queue.get_nowait()
                except asyncio.QueueEmpty:
                    pass


class ClientRegistry:
    def __init__(self) -> None:
        self._streams: dict[str, ClientStream] = {}

    def add(self, stream: ClientStream) -> None:
        if stream.client_id in self._streams:
            raise ValueError(f"Client already registered: {stream.client_id}")
        self._streams[stream.client_id] = stream

    def remove(self, client_id: str) -> ClientStream | None:
        return self._streams.pop(client_id, None)

    def client_ids(self) -> list[str]:
        return list(self._streams)

    def __len__(self) -> int:
        return len(self._streams)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._streams
