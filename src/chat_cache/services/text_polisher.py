"""Spelling and grammar polish for user input.

A fixed dictionary of common misspellings is applied locally; longer texts
may additionally go through a remote corrector. Remote failures never
surface: the locally corrected text is returned instead.
"""

import logging
import re
from collections.abc import Mapping

from chat_cache.errors import ChatServiceError
from chat_cache.protocols import TextCorrector

logger = logging.getLogger(__name__)

DEFAULT_CORRECTIONS: dict[str, str] = {
    "teh": "the",
    "recieve": "receive",
    "seperate": "separate",
    "definately": "definitely",
    "neccessary": "necessary",
    "occured": "occurred",
    "begining": "beginning",
    "beleive": "believe",
    "acheive": "achieve",
    "wierd": "weird",
    "freind": "friend",
    "thier": "their",
    "alot": "a lot",
}


class TextPolisher:
    """Local dictionary correction with an optional remote pass."""

    def __init__(
        self,
        client: TextCorrector | None = None,
        corrections: Mapping[str, str] | None = None,
        min_remote_length: int = 50,
    ) -> None:
        """Initialize the polisher.

        Args:
            client: Remote corrector used for longer texts. Local only if None.
            corrections: Misspelling -> correction map.
            min_remote_length: Texts shorter than this never go remote.
        """
        self._client = client
        if corrections is None:
            corrections = DEFAULT_CORRECTIONS
        self._corrections = {k.lower(): v for k, v in corrections.items()}
        self._min_remote_length = min_remote_length
        self._pattern = re.compile(
            r"\b(" + "|".join(re.escape(word) for word in self._corrections) + r")\b",
            re.IGNORECASE,
        )

    def correct_locally(self, text: str) -> str:
        """Replace known misspellings, keeping an initial capital."""
        if not self._corrections:
            return text
        return self._pattern.sub(self._replace, text)

    def _replace(self, match: re.Match[str]) -> str:
        word = match.group(0)
        replacement = self._corrections[word.lower()]
        if word[0].isupper():
            return replacement[0].upper() + replacement[1:]
        return replacement

    async def polish(self, text: str) -> str:
        """Return the polished text.

        The remote corrector is only consulted for texts of at least
        ``min_remote_length`` characters in which the local pass found
        something to fix.
        """
        corrected = self.correct_locally(text)
        if self._client is None or len(text) < self._min_remote_length or corrected == text:
            return corrected

        try:
            remote = await self._client.correct(text)
        except ChatServiceError as e:
            logger.warning("Remote polish failed, using local corrections: %s", e)
            return corrected

        return remote or corrected

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
