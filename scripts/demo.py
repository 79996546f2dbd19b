#!/usr/bin/env python3
"""
Demo script for the chat cache.

Walks through the answer ladder: instant responses, the image shortcut,
a network answer (or its fallback when no chat endpoint is reachable),
a cache hit on the repeated question and the spelling polish.
"""

import asyncio
import time

from chat_cache import ChatService
from chat_cache.entities import StreamChunk


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def print_chunk(chunk: StreamChunk) -> None:
    print(chunk.text, end="", flush=True)
    if chunk.is_final:
        print(f"\n  [model: {chunk.model_label}, error: {chunk.error_tag}]")


async def ask(service: ChatService, question: str, category: str = "auto") -> float:
    """Stream one single-turn question and return the elapsed time in ms."""
    print(f"\n💬 {question}\n")
    start = time.perf_counter()
    await service.send_message_stream([{"role": "user", "content": question}], category, print_chunk)
    return (time.perf_counter() - start) * 1000


async def demo_instant(service: ChatService) -> None:
    """Demonstrate instant responses."""
    print_section("Instant Responses")

    for question in ["hello", "thanks!", "what can you do"]:
        duration = await ask(service, question)
        print(f"  ⚡ {duration:.0f}ms")


async def demo_image(service: ChatService) -> None:
    """Demonstrate the image shortcut."""
    print_section("Image Shortcut")

    payload = await service.send_message(
        [{"role": "user", "content": "Generate an image of a lighthouse at dusk"}],
        "creative",
    )
    print(f"\n  Text: {payload.text}")
    print(f"  URL:  {payload.image_url}")


async def demo_network_and_cache(service: ChatService) -> None:
    """Demonstrate a network answer followed by a cache hit."""
    print_section("Network Answer and Cache Hit")

    question = "Explain the difference between a list and a tuple in Python"

    first = await ask(service, question, "code")
    print(f"  🌐 first answer: {first:.0f}ms")

    second = await ask(service, question, "code")
    print(f"  💾 repeated answer: {second:.0f}ms")


async def demo_spell_check(service: ChatService) -> None:
    """Demonstrate the spelling polish."""
    print_section("Spell Check")

    for text in ["I recieve teh mail", "Teh begining was wierd"]:
        corrected = await service.spell_check(text)
        print(f"\n  {text!r}")
        print(f"  -> {corrected!r}")


async def run() -> None:
    service = ChatService.create()
    try:
        await demo_instant(service)
        await demo_image(service)
        await demo_network_and_cache(service)
        await demo_spell_check(service)

        print_section("Statistics")
        stats = service.get_stats()
        for name, value in stats["performance"].items():
            print(f"  {name:<22} {value}")
        print(f"  {'cached entries':<22} {stats['cache']['total_entries']}")
    finally:
        await service.close()


def main() -> None:
    """Run all demos."""
    print("\n🚀 Chat Cache Demo")
    print("=" * 70)
    print("Without a reachable chat endpoint the network section shows the fallback")
    print("answer; set CHAT_API_BASE_URL to stream real completions.")

    try:
        asyncio.run(run())

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except Exception as e:
        print(f"\n❌ Error: {e}")


if __name__ == "__main__":
    main()
