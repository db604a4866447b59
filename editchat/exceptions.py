"""Domain exception hierarchy for the editchat client."""

from __future__ import annotations


class EditChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class CompletionConnectionError(EditChatError):
    """Raised when the completion host cannot be reached."""


class CompletionModelNotFoundError(EditChatError):
    """Raised when the configured model is unavailable."""


class CompletionStreamingError(EditChatError):
    """Raised when streaming fails for non-connectivity reasons."""


class ConfigValidationError(EditChatError):
    """Raised when an explicitly requested config file is missing or invalid."""


class LineSourceError(EditChatError):
    """Raised when the terminal line source fails irrecoverably."""
