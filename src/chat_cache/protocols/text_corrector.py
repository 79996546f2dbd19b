"""Text corrector protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextCorrector(Protocol):
    """Protocol for remote spelling/grammar correction services."""

    async def correct(self, text: str) -> str:
        """Return a corrected version of ``text``.

        Raises:
            ChatServiceError: If the remote service fails
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
