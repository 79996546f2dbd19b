"""
Tests for synthetic token streaming.
"""

import pytest

from chat_cache.entities import StreamChunk
from chat_cache.services import split_words, type_out
from chat_cache.services.delivery import word_delay_ms


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.mark.parametrize(
    "text",
    ["one", "two words", "  leading and trailing  ", "lines\nwith\n\ttabs\n", "```python\nx = 1\n```"],
)
def test_split_words_preserves_text(text):
    assert "".join(split_words(text)) == text


def test_split_words_attaches_leading_whitespace():
    assert split_words("Hello brave world") == ["Hello", " brave", " world"]


def test_word_delays():
    assert word_delay_ms("plain", 20) == 20
    assert word_delay_ms("internationalization", 20) == 30
    assert word_delay_ms("```python", 20) == 40
    assert word_delay_ms(" wonderful!", 20) == 35


@pytest.mark.asyncio
async def test_type_out_emits_words_then_one_final():
    chunks: list[StreamChunk] = []
    sleep = SleepRecorder()

    await type_out("Hello brave new world", chunks.append, 20, sleep=sleep)

    assert [c.text for c in chunks[:-1]] == ["Hello", " brave", " new", " world"]
    assert not any(c.is_final for c in chunks[:-1])
    assert chunks[-1] == StreamChunk.final()
    # No pause after the last word.
    assert sleep.delays == [0.02, 0.02, 0.02]


@pytest.mark.asyncio
async def test_type_out_uses_given_final_chunk():
    chunks: list[StreamChunk] = []
    final = StreamChunk.final(model_label="instant")

    await type_out("Hi!", chunks.append, 10, sleep=SleepRecorder(), final=final)

    assert chunks == [StreamChunk(text="Hi!"), final]


@pytest.mark.asyncio
async def test_type_out_empty_text_emits_only_final():
    chunks: list[StreamChunk] = []

    await type_out("", chunks.append, 10, sleep=SleepRecorder())

    assert chunks == [StreamChunk.final()]


def test_error_tag_requires_final_chunk():
    with pytest.raises(ValueError):
        StreamChunk(text="x", error_tag="timeout")
