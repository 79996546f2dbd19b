"""Response and stream chunk domain entities."""

from dataclasses import dataclass


class ErrorTag:
    """Error tags carried by terminal stream chunks."""

    CANCELLED = "cancelled"
    TIMEOUT = "timeout"
    TRANSPORT = "transport_error"
    UPSTREAM = "upstream_error"
    MALFORMED = "malformed_stream"


@dataclass(frozen=True)
class ResponsePayload:
    """A complete assistant answer.

    Attributes:
        text: The full response text
        model_label: Model or source that produced the text
        image_url: Optional generated image URL
        error_tag: Set when the answer is degraded or cancelled
    """

    text: str
    model_label: str
    image_url: str | None = None
    error_tag: str | None = None


@dataclass(frozen=True)
class StreamChunk:
    """One piece of a streamed answer.

    Exactly one chunk per response has ``is_final=True`` and it is always the
    last one delivered.
    """

    text: str = ""
    is_final: bool = False
    error_tag: str | None = None
    model_label: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        if self.error_tag is not None and not self.is_final:
            raise ValueError("Only the final chunk may carry an error tag")

    @classmethod
    def final(
        cls,
        text: str = "",
        model_label: str | None = None,
        image_url: str | None = None,
        error_tag: str | None = None,
    ) -> "StreamChunk":
        return cls(
            text=text,
            is_final=True,
            error_tag=error_tag,
            model_label=model_label,
            image_url=image_url,
        )

    @classmethod
    def cancelled(cls) -> "StreamChunk":
        return cls.final(error_tag=ErrorTag.CANCELLED)


@dataclass(frozen=True)
class StreamEvent:
    """One parsed frame of the upstream event stream."""

    text: str = ""
    model: str | None = None
    done: bool = False
