"""Bounded, append-only conversation log."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Iterable, Iterator, List, Tuple

from empathyai.models import DIALOGUE_SENDERS, DialogueMessage, Entry

logger = logging.getLogger(__name__)

EntryListener = Callable[[Entry], None]


def dialogue_messages(entries: Iterable[Entry]) -> List[DialogueMessage]:
    """User and assistant turns only, in original order."""
    return [
        DialogueMessage(sender=entry.sender.value, text=entry.text)
        for entry in entries
        if entry.sender in DIALOGUE_SENDERS
    ]


class TranscriptStore:
    """Keeps the most recent ``cap`` entries in arrival order.

    ``append`` is the only mutation. Once the cap is exceeded the oldest
    entry is dropped, so the retained entries are always the latest ``cap``
    in their original relative order. ``revision`` counts appends and lets
    derived values (the summary) check they still describe the same log.
    """

    def __init__(self, cap: int = 20):
        if cap < 1:
            raise ValueError("Transcript cap must be at least 1.")
        self._cap = cap
        self._entries: Deque[Entry] = deque(maxlen=cap)
        self._listeners: List[EntryListener] = []
        self._revision = 0

    @property
    def cap(self) -> int:
        return self._cap

    @property
    def revision(self) -> int:
        return self._revision

    def subscribe(self, listener: EntryListener) -> None:
        self._listeners.append(listener)

    def append(self, entry: Entry) -> None:
        if len(self._entries) == self._cap:
            logger.debug("Transcript full, evicting entry %s", self._entries[0].id)
        self._entries.append(entry)
        self._revision += 1
        for listener in self._listeners:
            listener(entry)

    def snapshot(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    def filter_dialogue(self) -> List[DialogueMessage]:
        return dialogue_messages(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(tuple(self._entries))
