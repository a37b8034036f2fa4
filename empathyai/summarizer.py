"""On-demand conversation summary."""

from __future__ import annotations

import logging
from typing import Iterable

from empathyai.errors import NothingToSummarizeError, ProviderError, SummarizeError
from empathyai.models import Entry
from empathyai.providers.base import AssistantBackend
from empathyai.transcript import dialogue_messages

logger = logging.getLogger(__name__)


class Summarizer:
    def __init__(self, backend: AssistantBackend):
        self.backend = backend

    async def summarize(self, snapshot: Iterable[Entry]) -> str:
        """Summarize the user/assistant entries of ``snapshot``.

        Status and emotion-tag entries are left out. The snapshot is only
        read, so repeated calls on the same entries are safe.
        """
        messages = dialogue_messages(snapshot)
        if not messages:
            raise NothingToSummarizeError(
                "There are no messages in the conversation to summarize."
            )

        logger.info("Summarizing %d messages", len(messages))
        try:
            summary = await self.backend.summarize_dialogue(messages)
        except (ProviderError, ValueError) as e:
            logger.warning("Summarization failed: %s", e)
            raise SummarizeError(str(e)) from e

        summary = (summary or "").strip()
        if not summary:
            raise SummarizeError("The summary came back empty.")
        return summary
