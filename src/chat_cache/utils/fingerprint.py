"""Conversation fingerprints used as cache keys."""

import hashlib
import json
from collections.abc import Sequence

from chat_cache.entities import ConversationTurn, ServiceCategory

DEFAULT_WINDOW = 3


def conversation_fingerprint(
    turns: Sequence[ConversationTurn],
    category: ServiceCategory,
    window: int = DEFAULT_WINDOW,
) -> str:
    """Deterministic cache key for the tail of a conversation.

    Only the last ``window`` turns are hashed, so two conversations that end
    the same way share a key. The category is both hashed and used as a
    prefix, which keeps categories in separate partitions.

    Args:
        turns: The conversation, oldest turn first
        category: The requested service category
        window: Number of trailing turns to hash (1-3)

    Returns:
        Key of the form ``"<category>:<hex digest>"``
    """
    if not 1 <= window <= 3:
        raise ValueError(f"window must be between 1 and 3, got {window}")

    category = ServiceCategory(category)
    serialized = json.dumps(
        {
            "category": category.value,
            "turns": [turn.to_dict() for turn in turns[-window:]],
        },
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    )
    digest = hashlib.blake2b(serialized.encode("utf-8"), digest_size=10).hexdigest()
    return f"{category.value}:{digest}"
