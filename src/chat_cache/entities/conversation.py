"""Conversation domain entities."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

ROLES = frozenset({"system", "user", "assistant"})


class ServiceCategory(str, Enum):
    """Model/persona profile requested by the caller.

    The category is part of every cache key, so each category is its own
    cache partition.
    """

    AUTO = "auto"
    CODE = "code"
    CREATIVE = "creative"
    KNOWLEDGE = "knowledge"
    GENERAL = "general"


@dataclass(frozen=True)
class ConversationTurn:
    """A single message of a conversation.

    Attributes:
        role: One of "system", "user" or "assistant"
        content: The message text
        image: Optional opaque image reference (data URL, upload id, ...)
    """

    role: str
    content: str
    image: str | None = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown role {self.role!r}, expected one of {sorted(ROLES)}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConversationTurn":
        """Build a turn from a ``{"role", "content", "image"}`` mapping."""
        return cls(
            role=data["role"],
            content=data.get("content") or "",
            image=data.get("image"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.image is not None:
            data["image"] = self.image
        return data
