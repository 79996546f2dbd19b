"""Utility modules for chat cache."""

from .fingerprint import conversation_fingerprint

__all__ = [
    "conversation_fingerprint",
]
