"""Canned answers for trivial inputs.

Rules are tested in order against the newest user message before any cache
or network work happens; the first match wins, so specific patterns must
come before general ones.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class InstantRule:
    """A pattern and the canned text it answers with.

    Attributes:
        pattern: Compiled regex searched in the trimmed, lower-cased message
        response: The canned answer
        context: Optional label describing what the rule is about
        max_length: If set, the rule only fires for messages up to this length
    """

    pattern: re.Pattern[str]
    response: str
    context: str | None = None
    max_length: int | None = None

    def matches(self, text: str) -> bool:
        if self.max_length is not None and len(text) > self.max_length:
            return False
        return self.pattern.search(text) is not None


def _rule(pattern: str, response: str, context: str | None = None, max_length: int | None = None) -> InstantRule:
    return InstantRule(re.compile(pattern, re.IGNORECASE), response, context, max_length)


DEFAULT_RULES: tuple[InstantRule, ...] = (
    _rule(
        r"^(?:hello|hi|hey|greetings|good (?:morning|afternoon|evening))\b",
        "Hello! I'm your coding companion. Ready to build something great?",
    ),
    _rule(
        r"^(?:thanks|thank you|appreciate it|cheers)\b",
        "You're welcome! What should we work on next?",
    ),
    _rule(
        r"^(?:how are you|how's it going|how do you do)\b",
        "Running smoothly and ready for your next challenge!",
    ),
    _rule(
        r"^(?:what can you do|what are your capabilities|help)\b",
        "I can help you:\n"
        "• Write code in most languages\n"
        "• Build web applications\n"
        "• Debug and optimize projects\n"
        "• Deploy your work\n"
        "• Generate images and creative content\n\n"
        "What would you like to create today?",
        context="capabilities",
    ),
    _rule(
        r"^(?:who are you|what are you|introduce yourself)\b",
        "I'm a chat assistant that combines several AI models to help you write, fix and ship code.",
    ),
    _rule(
        r"^(?:bye|goodbye|see you|farewell)\b",
        "Until next time, keep building! I'm here whenever you need me.",
    ),
    _rule(
        r"^(?:create|build|make)\b.*\bapps?\b",
        "Let's build it! What kind of app do you have in mind? I can create:\n"
        "• React or Next.js web apps\n"
        "• Full-stack applications\n"
        "• Mobile-responsive designs\n"
        "• AI-powered tools\n\n"
        "Describe your idea and we'll start.",
        context="app_creation",
    ),
    _rule(
        r"^(?:fix|debug|error|problem)\b",
        "Share your code or describe the issue and I'll help you track it down.",
        context="debugging",
    ),
    _rule(
        r"^(?:deploy|publish|host)\b",
        "Ready to launch? Tell me about your project and where it should run.",
        context="deployment",
    ),
    _rule(
        r"code",
        "Ready to code! Which language or framework would you like to work with?",
        context="coding",
        max_length=19,
    ),
    _rule(
        r"help",
        "I'm here to help! What specific challenge are you facing?",
        max_length=14,
    ),
)


class InstantResponder:
    """First-match lookup over an ordered rule table.

    Pure and synchronous: no I/O, no state.

    Example:
        ```python
        responder = InstantResponder.default()
        responder.match("  Hello there ")  # -> greeting text
        responder.match("Explain monads")  # -> None
        ```
    """

    def __init__(self, rules: Iterable[InstantRule]) -> None:
        self._rules = tuple(rules)

    @classmethod
    def default(cls) -> "InstantResponder":
        return cls(DEFAULT_RULES)

    @property
    def rules(self) -> tuple[InstantRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def match(self, text: str) -> str | None:
        """Return the canned answer of the first matching rule, if any."""
        normalized = text.strip().lower()
        if not normalized:
            return None
        for rule in self._rules:
            if rule.matches(normalized):
                return rule.response
        return None
