"""Core constants for AskTabs.

Thresholds and limits shared by the extraction, answering and citation
stages. Runtime-tunable values live in the config schema; these are the
defaults it falls back to.
"""

# Extraction thresholds (characters)
MAX_TEXT_CHARS = 10_000
"""Hard cap on the text stored for a single tab."""

SUCCESS_MIN_CHARS = 100
"""Minimum extracted text length for a page to count as having content."""

MAIN_CONTENT_FLOOR = 200
"""A main-content candidate must exceed this length to be considered."""

MAIN_CONTENT_SUFFICIENT = 300
"""Below this, the main-content strategy falls back to the whole body."""

BODY_SUFFICIENT = 200
"""Below this, the body strategy falls back to block-element harvesting."""

BLOCK_MIN_CHARS = 30
BLOCK_MAX_CHARS = 1000
BLOCKS_TOTAL_CHARS = 8000

# Citation matching
MIN_CITABLE_TITLE_CHARS = 6
"""Titles shorter than this are too generic to cite by literal match."""

# Answering defaults
DEFAULT_MAX_CONTEXT_TABS = 10
DEFAULT_EXCERPT_CHARS = 300
DEFAULT_SNIPPET_CHARS = 100
DEFAULT_KEYWORD_SNIPPET_CHARS = 150
DEFAULT_KEYWORD_TOP_K = 1
DEFAULT_ANSWER_TIMEOUT = 30.0
MIN_ANSWER_CHARS = 50

# Summarizer defaults
DEFAULT_SUMMARIZER_TIMEOUT = 2.0
SUMMARIZER_MIN_CHARS = 200
SUMMARIZER_INPUT_CHARS = 3000

# Browser defaults
DEFAULT_CDP_URL = "http://localhost:9222"
DEFAULT_TAB_TIMEOUT = 8.0

# Canned answers
REDIRECT_ANSWER = "Ask about your tabs."
NO_CONTENT_ANSWER = "No content found. Refresh tabs."
KEYWORD_NO_CONTENT_ANSWER = "No content found."
KEYWORD_NO_MATCH_ANSWER = "No matches found."
GREETING = "Ask anything about your opened tabs"
