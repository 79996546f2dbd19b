"""Exceptions raised by transports and recovered by the chat service."""

from chat_cache.entities import ErrorTag


class ChatServiceError(Exception):
    """Base class for recoverable network-side failures."""

    error_tag = ErrorTag.TRANSPORT


class TransportError(ChatServiceError):
    """Connection failure or non-success HTTP status."""


class UpstreamError(ChatServiceError):
    """The endpoint reported an error payload."""

    error_tag = ErrorTag.UPSTREAM


class StreamFormatError(ChatServiceError):
    """The event stream ended early or could not be read."""

    error_tag = ErrorTag.MALFORMED
