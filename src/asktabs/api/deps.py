"""Dependency injection for FastAPI routes.

Provides the singleton services. The CLI builds its pipeline through the same
getters so both entry points share one wiring.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

from fastapi import Depends

from asktabs.app_utils.config_schema import AskTabsConfig
from asktabs.app_utils.paths import get_state_file
from asktabs.browser import CDPBrowserGateway
from asktabs.core.citations import CitationResolver
from asktabs.core.extraction import PageTextExtractor
from asktabs.core.ranking import KeywordFallbackRanker
from asktabs.services import (
    AnswerSynthesizer,
    AskService,
    ConfigService,
    ConversationLog,
    NavigationService,
    OllamaSummarizer,
    RefreshScheduler,
    RemoteAnswerClient,
    SnapshotAggregator,
    SnapshotStore,
    StateStore,
    TabContentResolver,
)


@lru_cache
def get_config_service() -> ConfigService:
    """Get the singleton ConfigService instance."""
    return ConfigService()


@lru_cache
def get_config() -> AskTabsConfig:
    """Configuration loaded once per process."""
    return get_config_service().load()


@lru_cache
def get_gateway() -> CDPBrowserGateway:
    """Get the singleton browser gateway."""
    config = get_config()
    return CDPBrowserGateway(
        base_url=config.browser.cdp_url,
        request_timeout=config.browser.request_timeout,
    )


@lru_cache
def get_conversation_log() -> ConversationLog:
    """Get the singleton ConversationLog, restored from the state file."""
    config = get_config()
    state_file = (
        Path(config.storage.state_file).expanduser()
        if config.storage.state_file
        else get_state_file()
    )
    return ConversationLog.from_store(StateStore(state_file))


@lru_cache
def get_snapshot_store() -> SnapshotStore:
    """Get the singleton SnapshotStore, seeded with the last persisted tabs."""
    conversation = get_conversation_log()
    store = SnapshotStore(conversation.restored_snapshot)
    store.add_listener(conversation.remember_snapshot)
    return store


def _build_summarizer(config: AskTabsConfig) -> Optional[OllamaSummarizer]:
    if not config.summarizer.enabled:
        return None
    return OllamaSummarizer(
        base_url=config.summarizer.base_url,
        model=config.summarizer.model,
        timeout=config.summarizer.timeout,
    )


@lru_cache
def get_aggregator() -> SnapshotAggregator:
    """Get the singleton SnapshotAggregator.

    It must be a singleton: its lock is what serializes refreshes.
    """
    config = get_config()
    gateway = get_gateway()
    resolver = TabContentResolver(
        gateway=gateway,
        extractor=PageTextExtractor(
            max_chars=config.extraction.max_text_chars,
            success_min_chars=config.extraction.success_min_chars,
        ),
        summarizer=_build_summarizer(config),
        restricted_schemes=config.extraction.restricted_schemes,
        tab_timeout=config.extraction.tab_timeout,
        success_min_chars=config.extraction.success_min_chars,
    )
    return SnapshotAggregator(
        gateway=gateway,
        resolver=resolver,
        store=get_snapshot_store(),
        excluded_prefixes=config.extraction.excluded_prefixes,
    )


@lru_cache
def get_refresh_scheduler() -> RefreshScheduler:
    """Get the singleton RefreshScheduler (started in the app lifespan)."""
    config = get_config()
    return RefreshScheduler(
        get_aggregator(),
        debounce=config.refresh.debounce,
        interval=config.refresh.interval,
    )


@lru_cache
def get_answer_synthesizer() -> AnswerSynthesizer:
    config = get_config()
    client = None
    if config.answer.remote_available:
        client = RemoteAnswerClient(
            endpoint=config.answer.endpoint, timeout=config.answer.timeout
        )
    return AnswerSynthesizer(
        client=client,
        citation_resolver=CitationResolver(),
        max_context_tabs=config.answer.max_context_tabs,
        excerpt_chars=config.answer.excerpt_chars,
        snippet_chars=config.answer.snippet_chars,
    )


@lru_cache
def get_ask_service() -> AskService:
    """Get the singleton AskService."""
    config = get_config()
    return AskService(
        aggregator=get_aggregator(),
        synthesizer=get_answer_synthesizer(),
        ranker=KeywordFallbackRanker(top_k=config.answer.keyword_top_k),
        conversation=get_conversation_log(),
        stale_after=config.refresh.stale_after,
    )


@lru_cache
def get_navigation_service() -> NavigationService:
    return NavigationService(get_gateway())


def clear_caches() -> None:
    """Drop all singletons (shutdown and tests)."""
    for getter in (
        get_navigation_service,
        get_ask_service,
        get_answer_synthesizer,
        get_refresh_scheduler,
        get_aggregator,
        get_snapshot_store,
        get_conversation_log,
        get_gateway,
        get_config,
        get_config_service,
    ):
        getter.cache_clear()


# Type aliases for FastAPI dependency injection
ConfigServiceDep = Annotated[ConfigService, Depends(get_config_service)]
SnapshotStoreDep = Annotated[SnapshotStore, Depends(get_snapshot_store)]
AggregatorDep = Annotated[SnapshotAggregator, Depends(get_aggregator)]
RefreshSchedulerDep = Annotated[RefreshScheduler, Depends(get_refresh_scheduler)]
AskServiceDep = Annotated[AskService, Depends(get_ask_service)]
ConversationLogDep = Annotated[ConversationLog, Depends(get_conversation_log)]
NavigationServiceDep = Annotated[NavigationService, Depends(get_navigation_service)]
