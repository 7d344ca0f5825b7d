"""Error hierarchy for context budget management."""

from typing import Optional


class ContextBudgetError(Exception):
    """Base class for all context budget errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidInputError(ContextBudgetError, ValueError):
    """Raised when core context text is empty or missing."""


class InvalidArgumentError(ContextBudgetError, ValueError):
    """Raised when a threshold, file count or score is out of range."""


class NotInitializedError(ContextBudgetError, RuntimeError):
    """Raised when injection or composition runs before the core context exists."""


class ConfigurationError(ContextBudgetError, ValueError):
    """Raised for invalid configuration or an unavailable tokenizer backend."""


class ScanError(ContextBudgetError):
    """Raised by a relevance scanner that cannot enumerate candidates."""

    def __init__(self, message: str, root_path: Optional[str] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, cause)
        self.root_path = root_path
