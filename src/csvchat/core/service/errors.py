"""Error taxonomy for the chat pipeline.

Every failure leaves the pipeline as a ``ChatError`` carrying an HTTP
status, a stable code and a message that is safe to show to the user.
Provider exceptions are mapped by ``classify_provider_error``; their raw
text is only ever logged.
"""

from collections.abc import Iterator

# Error codes
CODE_MISSING_FIELDS = "MISSING_FIELDS"
CODE_INVALID_BODY = "INVALID_BODY"
CODE_QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
CODE_RESPONSE_TOO_LONG = "RESPONSE_TOO_LONG"
CODE_INPUT_TOO_LONG = "INPUT_TOO_LONG"
CODE_PROCESSING_ERROR = "PROCESSING_ERROR"

# User-facing messages
MSG_MISSING_FIELDS = "Missing required fields"
MSG_INVALID_BODY = "Invalid request body"
MSG_QUOTA_EXCEEDED = "API quota exceeded. Please try again in a few minutes."
MSG_RESPONSE_TOO_LONG = "Response too long. Please try a more specific question."
MSG_INPUT_TOO_LONG = (
    "The CSV file or question is too long. "
    "Please try a smaller file or a more specific question."
)
MSG_PROCESSING_ERROR = "Failed to process your request. Please try again."

HTTP_STATUS_RATE_LIMITED = 429

_RATE_LIMIT_MARKERS = ("resource_exhausted", "quota", "rate limit", "too many requests")
_LENGTH_MARKERS = ("token", "too long", "context length", "context_length")


class ChatError(Exception):
    """Base for all pipeline failures surfaced to the client."""

    status_code: int = 500
    code: str = CODE_PROCESSING_ERROR
    default_message: str = MSG_PROCESSING_ERROR

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class InputValidationError(ChatError):
    """Required request fields are missing; no provider call was made."""

    status_code = 400
    code = CODE_MISSING_FIELDS
    default_message = MSG_MISSING_FIELDS


class ProviderQuotaError(ChatError):
    """The provider rejected the call for rate-limit or quota reasons."""

    status_code = 429
    code = CODE_QUOTA_EXCEEDED
    default_message = MSG_QUOTA_EXCEEDED


class ResponseTooLongError(ChatError):
    """Either the provider or the local budget check found the text too long."""

    status_code = 400
    code = CODE_RESPONSE_TOO_LONG
    default_message = MSG_RESPONSE_TOO_LONG

    @classmethod
    def input_too_long(cls) -> "ResponseTooLongError":
        """The provider complained about the prompt size."""
        return cls(MSG_INPUT_TOO_LONG, code=CODE_INPUT_TOO_LONG)


class UnclassifiedError(ChatError):
    """Catch-all for failures with no better classification."""


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _is_rate_limited(exc: BaseException) -> bool:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        # google.api_core reports HTTPStatus, openai an int
        if isinstance(value, int) and value == HTTP_STATUS_RATE_LIMITED:
            return True
    text = str(exc).lower()
    return any(marker in text for marker in _RATE_LIMIT_MARKERS)


def _mentions_length_limit(exc: BaseException) -> bool:
    text = str(exc).lower()
    return any(marker in text for marker in _LENGTH_MARKERS)


def classify_provider_error(exc: BaseException) -> ChatError:
    """Map an arbitrary exception to the chat error taxonomy.

    Rate limits win over length complaints, which win over everything
    else.  The whole ``__cause__`` / ``__context__`` chain is inspected
    since client libraries often wrap the transport error.
    """
    if isinstance(exc, ChatError):
        return exc

    chain = list(_exception_chain(exc))
    if any(_is_rate_limited(e) for e in chain):
        return ProviderQuotaError()
    if any(_mentions_length_limit(e) for e in chain):
        return ResponseTooLongError.input_too_long()
    return UnclassifiedError()
