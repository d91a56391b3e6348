"""Configuration schema and default values for AskTabs."""

from dataclasses import asdict, dataclass, field, fields
from typing import List, Optional

from asktabs.core.constants import (
    DEFAULT_ANSWER_TIMEOUT,
    DEFAULT_CDP_URL,
    DEFAULT_EXCERPT_CHARS,
    DEFAULT_KEYWORD_TOP_K,
    DEFAULT_MAX_CONTEXT_TABS,
    DEFAULT_SNIPPET_CHARS,
    DEFAULT_SUMMARIZER_TIMEOUT,
    DEFAULT_TAB_TIMEOUT,
    MAX_TEXT_CHARS,
    SUCCESS_MIN_CHARS,
)

DEFAULT_RESTRICTED_SCHEMES = [
    "chrome:",
    "edge:",
    "about:",
    "data:",
    "devtools:",
    "view-source:",
]

# Pages never enumerated at all (browser system pages)
DEFAULT_EXCLUDED_PREFIXES = ["chrome://", "about:", "edge://"]


@dataclass
class BrowserConfig:
    """DevTools endpoint of the browser whose tabs are read."""

    cdp_url: str = DEFAULT_CDP_URL
    request_timeout: float = 10.0


@dataclass
class ExtractionConfig:
    """Per-tab extraction limits and scheme policy."""

    tab_timeout: float = DEFAULT_TAB_TIMEOUT
    max_text_chars: int = MAX_TEXT_CHARS
    success_min_chars: int = SUCCESS_MIN_CHARS
    restricted_schemes: List[str] = field(
        default_factory=lambda: list(DEFAULT_RESTRICTED_SCHEMES)
    )
    excluded_prefixes: List[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_PREFIXES)
    )

    def __post_init__(self):
        """Validate configuration values."""
        if self.tab_timeout <= 0:
            raise ValueError(f"tab_timeout must be positive, got {self.tab_timeout}")
        if self.max_text_chars < self.success_min_chars:
            raise ValueError(
                "max_text_chars must be at least success_min_chars, "
                f"got {self.max_text_chars} < {self.success_min_chars}"
            )


@dataclass
class SummarizerConfig:
    """Optional per-tab tl;dr through a local Ollama model."""

    enabled: bool = False
    base_url: str = "http://localhost:11434"
    model: str = "llama3.2:3b"
    timeout: float = DEFAULT_SUMMARIZER_TIMEOUT


@dataclass
class AnswerConfig:
    """Remote answering service and context window settings."""

    enabled: bool = True
    endpoint: Optional[str] = None
    timeout: float = DEFAULT_ANSWER_TIMEOUT
    max_context_tabs: int = DEFAULT_MAX_CONTEXT_TABS
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS
    snippet_chars: int = DEFAULT_SNIPPET_CHARS
    keyword_top_k: int = DEFAULT_KEYWORD_TOP_K

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_context_tabs < 1:
            raise ValueError(
                f"max_context_tabs must be at least 1, got {self.max_context_tabs}"
            )
        if self.keyword_top_k < 1:
            raise ValueError(
                f"keyword_top_k must be at least 1, got {self.keyword_top_k}"
            )
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def remote_available(self) -> bool:
        return self.enabled and bool(self.endpoint)


@dataclass
class RefreshConfig:
    """Refresh scheduling."""

    debounce: float = 0.5
    interval: float = 10.0
    stale_after: float = 5.0


@dataclass
class StorageConfig:
    """Persisted state location. Empty means the user data directory."""

    state_file: Optional[str] = None


@dataclass
class AskTabsConfig:
    """Main configuration for AskTabs."""

    browser: BrowserConfig
    extraction: ExtractionConfig
    summarizer: SummarizerConfig
    answer: AnswerConfig
    refresh: RefreshConfig
    storage: StorageConfig

    def to_dict(self) -> dict:
        """Convert config to dictionary for YAML serialization."""
        return {
            "browser": asdict(self.browser),
            "extraction": asdict(self.extraction),
            "summarizer": asdict(self.summarizer),
            "answer": asdict(self.answer),
            "refresh": asdict(self.refresh),
            "storage": asdict(self.storage),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AskTabsConfig":
        """Create config from dictionary (loaded from YAML)."""

        def _filter(cls_, data_):
            """Filter dict to only include known dataclass fields."""
            known = {f.name for f in fields(cls_)}
            return {k: v for k, v in (data_ or {}).items() if k in known}

        return cls(
            browser=BrowserConfig(**_filter(BrowserConfig, data.get("browser"))),
            extraction=ExtractionConfig(
                **_filter(ExtractionConfig, data.get("extraction"))
            ),
            summarizer=SummarizerConfig(
                **_filter(SummarizerConfig, data.get("summarizer"))
            ),
            answer=AnswerConfig(**_filter(AnswerConfig, data.get("answer"))),
            refresh=RefreshConfig(**_filter(RefreshConfig, data.get("refresh"))),
            storage=StorageConfig(**_filter(StorageConfig, data.get("storage"))),
        )

    @classmethod
    def create_default(cls) -> "AskTabsConfig":
        return cls(
            browser=BrowserConfig(),
            extraction=ExtractionConfig(),
            summarizer=SummarizerConfig(),
            answer=AnswerConfig(),
            refresh=RefreshConfig(),
            storage=StorageConfig(),
        )
