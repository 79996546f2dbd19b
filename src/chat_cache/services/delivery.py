"""Synthetic token streaming.

Instant answers, cache hits and fallbacks are replayed word by word with
small pauses so they look like a live stream to the caller.
"""

import asyncio
import re
from collections.abc import Awaitable, Callable

from chat_cache.entities import StreamChunk

Emit = Callable[[StreamChunk], None]
Sleep = Callable[[float], Awaitable[None]]

_WORD = re.compile(r"\s*\S+(?:\s+$)?")
_CODE_FENCE = "```"
_SENTENCE_END = ("!", "?", ".")

LONG_WORD_CHARS = 10
LONG_WORD_PAUSE_MS = 10.0
CODE_FENCE_PAUSE_MS = 20.0
SENTENCE_PAUSE_MS = 15.0


def split_words(text: str) -> list[str]:
    """Split text into words, each carrying the whitespace before it.

    ``"".join(split_words(text)) == text`` for any text containing a
    non-whitespace character.
    """
    return _WORD.findall(text)


def word_delay_ms(word: str, base_delay_ms: float) -> float:
    """Pause after ``word``: longer for long words, code fences and sentence ends."""
    stripped = word.strip()
    delay = base_delay_ms
    if len(stripped) > LONG_WORD_CHARS:
        delay += LONG_WORD_PAUSE_MS
    if _CODE_FENCE in stripped:
        delay += CODE_FENCE_PAUSE_MS
    if stripped.endswith(_SENTENCE_END):
        delay += SENTENCE_PAUSE_MS
    return delay


async def type_out(
    text: str,
    emit: Emit,
    per_word_delay_ms: float,
    sleep: Sleep = asyncio.sleep,
    final: StreamChunk | None = None,
) -> None:
    """Emit ``text`` word by word, then exactly one final chunk.

    Args:
        text: The text to replay
        emit: Receives every chunk in order
        per_word_delay_ms: Base pause between words
        sleep: Awaitable sleep taking seconds (injectable for tests)
        final: Terminal chunk to emit; an empty final chunk if None
    """
    words = split_words(text)
    last = len(words) - 1

    for i, word in enumerate(words):
        emit(StreamChunk(text=word))
        if i < last:
            await sleep(word_delay_ms(word, per_word_delay_ms) / 1000)

    emit(final if final is not None else StreamChunk.final())
