"""The ASK operation: refresh if stale, answer, log the exchange."""

import logging
from datetime import timedelta
from typing import Literal, Optional

from asktabs.core.errors import TabEnumerationError
from asktabs.core.models import AnswerResult, Snapshot, utc_now
from asktabs.core.ranking import KeywordFallbackRanker

from .answer_service import AnswerSynthesizer
from .conversation import ConversationLog
from .snapshot_service import SnapshotAggregator

logger = logging.getLogger(__name__)

AskMode = Literal["auto", "keyword"]


class AskService:
    """Answers user questions; never raises to the caller.

    ``mode="keyword"`` bypasses the remote path and ranks tabs by keyword
    overlap. The same ranker answers if the synthesizer itself fails.
    """

    def __init__(
        self,
        aggregator: SnapshotAggregator,
        synthesizer: AnswerSynthesizer,
        ranker: Optional[KeywordFallbackRanker] = None,
        conversation: Optional[ConversationLog] = None,
        stale_after: float = 5.0,
    ):
        self.aggregator = aggregator
        self.synthesizer = synthesizer
        self.ranker = ranker or KeywordFallbackRanker()
        self.conversation = conversation
        self.stale_after = stale_after

    def is_stale(self, snapshot: Snapshot) -> bool:
        if snapshot.is_empty:
            return True
        age = utc_now() - snapshot.last_updated
        return age > timedelta(seconds=self.stale_after)

    async def current_snapshot(self) -> Snapshot:
        """The published snapshot, refreshed first if it is stale."""
        snapshot = self.aggregator.store.current
        if not self.is_stale(snapshot):
            return snapshot
        try:
            return await self.aggregator.refresh()
        except TabEnumerationError as e:
            logger.warning(f"Refresh before answering failed, using last snapshot: {e}")
            return self.aggregator.store.current
        except Exception:
            logger.exception("Refresh before answering crashed, using last snapshot")
            return self.aggregator.store.current

    async def answer(self, question: str, mode: AskMode = "auto") -> AnswerResult:
        snapshot = await self.current_snapshot()
        if mode == "keyword":
            return self.ranker.answer(question, snapshot.tabs)
        try:
            return await self.synthesizer.answer(question, snapshot)
        except Exception:
            logger.exception("Answer synthesis failed, using keyword ranking")
            return self.ranker.answer(question, snapshot.tabs)

    async def ask(self, question: str, mode: AskMode = "auto") -> AnswerResult:
        """Answer a question and record both sides in the conversation log."""
        if self.conversation is not None:
            await self.conversation.append(question, "user")

        result = await self.answer(question, mode)

        if self.conversation is not None:
            await self.conversation.append(result.answer, "assistant", result.citations)
        return result
