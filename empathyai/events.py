"""In-process event bus feeding the browser's Server-Sent Events stream."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


@dataclass
class Event:
    type: str
    data: Dict[str, Any] = field(default_factory=dict)
    ts: float = field(default_factory=time.time)

    def to_dict(self):
        return {"type": self.type, "data": self.data, "ts": self.ts}

    def to_sse(self) -> str:
        return f"event: {self.type}\ndata: {json.dumps(self.to_dict())}\n\n"


class EventBus:
    """Fan-out of events to every connected stream.

    ``publish`` never blocks: a subscriber that falls behind loses its
    oldest pending events. ``history`` keeps the recent events for
    inspection and tests.
    """

    def __init__(self, max_pending: int = 256, history_size: int = 100):
        self._subscribers: List[asyncio.Queue] = []
        self._max_pending = max_pending
        self._history_size = history_size
        self.history: List[Event] = []

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_pending)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, type: str, **data: Any) -> Event:
        event = Event(type=type, data=data)
        self.history.append(event)
        del self.history[:-self._history_size]

        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()
                logger.warning("Event subscriber lagging, dropped oldest event")
            queue.put_nowait(event)
        return event

    def of_type(self, type: str) -> List[Event]:
        return [e for e in self.history if e.type == type]
