"""Service layer for business logic.

This layer contains the request lifecycle and its collaborators.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from chat_cache.services import ChatService

    # Using factory method (recommended)
    service = ChatService.create()

    # Or manual creation
    service = ChatService(transport=transport, cache=cache)
    ```
"""

from .chat_service import INSTANT_MODEL_LABEL, ChatService, TypingSpeeds
from .chat_sessions import ChatSessions
from .delivery import split_words, type_out
from .fallback import FALLBACK_MODEL_LABEL, FallbackPolicy
from .image_generation import IMAGE_MODEL_LABEL, ImagePromptBuilder
from .instant_responses import InstantResponder, InstantRule
from .profiles import CategoryProfile
from .text_polisher import TextPolisher

__all__ = [
    "ChatService",
    "ChatSessions",
    "TypingSpeeds",
    "INSTANT_MODEL_LABEL",
    "FALLBACK_MODEL_LABEL",
    "IMAGE_MODEL_LABEL",
    "FallbackPolicy",
    "ImagePromptBuilder",
    "InstantResponder",
    "InstantRule",
    "CategoryProfile",
    "TextPolisher",
    "split_words",
    "type_out",
]
