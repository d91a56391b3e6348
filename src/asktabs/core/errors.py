"""Exception types for the tab aggregation and answering pipeline."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Why a tab produced no usable content. Stored on TabRecord.error."""

    RESTRICTED = "restricted"
    PERMISSION_DENIED = "permission_denied"
    EXTRACTION_FAILURE = "extraction_failure"


class AskTabsError(Exception):
    """Base class for AskTabs errors."""


class BrowserError(AskTabsError):
    """Raised when the browser gateway cannot complete a request."""


class ScriptInjectionError(BrowserError):
    """Raised when evaluating code inside a page fails."""

    def __init__(self, tab_id: str, message: str):
        self.tab_id = tab_id
        super().__init__(f"Script injection failed for tab {tab_id}: {message}")


class TabNotFoundError(BrowserError):
    """Raised when a tab id no longer refers to an open tab."""

    def __init__(self, tab_id: str):
        self.tab_id = tab_id
        super().__init__(f"Tab not found: {tab_id}")


class TabEnumerationError(AskTabsError):
    """Raised when the list of open tabs cannot be obtained at all."""


class RemoteCallError(AskTabsError):
    """Raised for network failures, non-success statuses and timeouts."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class AnswerValidationError(AskTabsError):
    """Raised when a remote answer is present but unusable."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Answer rejected: {reason}")
