"""
AskTabs: ask questions about the browser tabs you have open.

Aggregates the text of open tabs into an in-memory snapshot and answers
questions about it through a remote model, with deterministic local
fallbacks and citations back to the source tabs.
"""

__version__ = "0.1.0"
