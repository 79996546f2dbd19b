"""Remote text polish client.

Sends text to an OpenAI-compatible ``/chat/completions`` endpoint and asks
for a spelling and grammar corrected copy. Satisfies the TextCorrector
protocol.
"""

import httpx

from chat_cache.config import settings
from chat_cache.errors import TransportError, UpstreamError

POLISH_INSTRUCTION = "Fix spelling, grammar, and improve clarity. Return ONLY the corrected text:\n\n"


class HttpPolishClient:
    """httpx-based implementation of the TextCorrector protocol."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.polish_base_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.polish_api_key
        self._model = model or settings.polish_model
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @classmethod
    def create(cls) -> "HttpPolishClient":
        return cls()

    async def correct(self, text: str) -> str:
        """Ask the remote model for a corrected copy of ``text``.

        Raises:
            TransportError: If the request fails
            UpstreamError: If the response has no completion text
        """
        url = f"{self._base_url}/chat/completions"
        headers = {}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": POLISH_INSTRUCTION + text}],
            "temperature": 0.1,
            "max_tokens": min(len(text) * 2, 1000),
            "stream": False,
        }

        try:
            response = await self.client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportError(f"Polish API error: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError(f"Unexpected polish response format: {data}") from e

        if content is None:
            return ""
        if not isinstance(content, str):
            raise UpstreamError(f"Polish response content is not text: {type(content).__name__}")
        return content.strip()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
