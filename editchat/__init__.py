"""Top-level package for editchat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import ChatApp
    from .chat import OllamaCompletion
    from .config import ensure_config_dir, load_config
    from .controller import SessionController
    from .exceptions import (
        CompletionConnectionError,
        CompletionModelNotFoundError,
        CompletionStreamingError,
        ConfigValidationError,
        EditChatError,
        LineSourceError,
    )
    from .exchange import CompletionExchange, ExchangeResult
    from .state import SessionMode, SessionState
    from .transcript import Message, Sender, TranscriptStore

__all__ = [
    "ChatApp",
    "CompletionConnectionError",
    "CompletionExchange",
    "CompletionModelNotFoundError",
    "CompletionStreamingError",
    "ConfigValidationError",
    "EditChatError",
    "ExchangeResult",
    "LineSourceError",
    "Message",
    "OllamaCompletion",
    "Sender",
    "SessionController",
    "SessionMode",
    "SessionState",
    "TranscriptStore",
    "ensure_config_dir",
    "load_config",
]

_LAZY_EXPORTS: dict[str, str] = {
    "ChatApp": ".app",
    "OllamaCompletion": ".chat",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "SessionController": ".controller",
    "CompletionConnectionError": ".exceptions",
    "CompletionModelNotFoundError": ".exceptions",
    "CompletionStreamingError": ".exceptions",
    "ConfigValidationError": ".exceptions",
    "EditChatError": ".exceptions",
    "LineSourceError": ".exceptions",
    "CompletionExchange": ".exchange",
    "ExchangeResult": ".exchange",
    "SessionMode": ".state",
    "SessionState": ".state",
    "Message": ".transcript",
    "Sender": ".transcript",
    "TranscriptStore": ".transcript",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols so terminal dependencies load only when needed."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
