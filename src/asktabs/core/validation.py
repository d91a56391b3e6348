"""Quality checks for answers returned by the remote answering service.

The remote service is untrusted and may return templated filler. Validators
are plain callables so the heuristic can be swapped or tested on its own.
"""

from typing import Optional, Protocol, Sequence

from .constants import MIN_ANSWER_CHARS
from .errors import AnswerValidationError

DEGENERATE_PATTERNS = ("Found content. Check:",)


class AnswerValidator(Protocol):
    """Decides whether a remote answer may be shown to the user."""

    def __call__(self, answer: Optional[str]) -> str:
        """Return the accepted answer or raise AnswerValidationError."""
        ...


class QualityHeuristicValidator:
    """Rejects empty, short, unquoted or known-degenerate answers.

    Answers must quote at least one tab title, so an answer without a double
    quote cannot reference any tab.
    """

    def __init__(
        self,
        min_chars: int = MIN_ANSWER_CHARS,
        degenerate_patterns: Sequence[str] = DEGENERATE_PATTERNS,
    ):
        self.min_chars = min_chars
        self.degenerate_patterns = tuple(degenerate_patterns)

    def __call__(self, answer: Optional[str]) -> str:
        if not answer or not answer.strip():
            raise AnswerValidationError("empty")
        if len(answer) < self.min_chars:
            raise AnswerValidationError(f"shorter than {self.min_chars} chars")
        if '"' not in answer:
            raise AnswerValidationError("no quoted title")
        for pattern in self.degenerate_patterns:
            if pattern in answer:
                raise AnswerValidationError(f"degenerate output: {pattern!r}")
        return answer
