"""Image prompt shortcut.

Requests like "draw a lighthouse at dusk" are answered without calling the
chat endpoint: the prompt is cleaned and embedded in a templated image URL.
The URL is only built, never fetched.
"""

import re
import time
from collections.abc import Callable
from urllib.parse import quote

from chat_cache.config import settings
from chat_cache.entities import ResponsePayload

IMAGE_MODEL_LABEL = "image-engine"

_IMAGE_INTENT = re.compile(
    r"\b(?:generate|create|make|draw|paint|render)\b.*"
    r"\b(?:image|picture|photo|art|artwork|drawing|illustration|visual)s?\b"
    r"|^\s*(?:draw|paint)\b",
    re.IGNORECASE,
)
_VERBS = re.compile(r"\b(?:generate|create|make|draw)\b", re.IGNORECASE)
_LEAD_IN = re.compile(
    r"^(?:(?:me|us|an?|the|some)\s+)*"
    r"(?:image|picture|photo|drawing|illustration|art|artwork|visual)s?"
    r"(?:\s+(?:of|showing|with|for))?\s+",
    re.IGNORECASE,
)
_SPACES = re.compile(r"\s+")


class ImagePromptBuilder:
    """Detects image requests and turns them into image URLs."""

    def __init__(
        self,
        url_template: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the builder.

        Args:
            url_template: Template with ``{prompt}`` and ``{seed}`` fields.
                Defaults to settings.image_url_template.
            clock: Returns the current time in seconds; used for the seed.
        """
        self._url_template = url_template or settings.image_url_template
        self._clock = clock

    def wants_image(self, text: str) -> bool:
        return _IMAGE_INTENT.search(text) is not None

    def clean_prompt(self, text: str) -> str:
        """Strip request verbs and "image of"-style lead-ins.

        ``"Generate an image of a red fox"`` -> ``"a red fox"``
        """
        prompt = _SPACES.sub(" ", _VERBS.sub(" ", text)).strip()
        prompt = _LEAD_IN.sub("", prompt, count=1).strip()
        return prompt.strip(" .!?:") or text.strip()

    def build_url(self, prompt: str) -> str:
        seed = int(self._clock() * 1000)
        return self._url_template.format(prompt=quote(prompt, safe=""), seed=seed)

    def build(self, text: str) -> ResponsePayload:
        """Build the descriptive answer and image URL for a request."""
        prompt = self.clean_prompt(text)
        description = (
            f'**Image generated!**\n\nHere is an image for: "{prompt}"\n\n'
            "It should appear below this message."
        )
        return ResponsePayload(
            text=description,
            model_label=IMAGE_MODEL_LABEL,
            image_url=self.build_url(prompt),
        )
