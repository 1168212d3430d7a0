"""Post-processing of provider replies: normalization and budget check."""

from csvchat.infra.tokens import estimate_tokens

from .errors import ResponseTooLongError

HEADING_MARKER = "#"
DEFAULT_HEADING = "# Analysis"

FOLLOW_UP_MARKERS = ("follow-up", "next steps")
FOLLOW_UP_SECTION = (
    "### Suggested Follow-up Questions\n"
    "- What other aspects of the data would you like to explore?\n"
    "- Would you like to see any specific trends or patterns?\n"
    "- Should we analyze any particular relationships in the data?"
)


def normalize_response(text: str) -> str:
    """Guarantee a leading heading and a follow-up section."""
    formatted = text.strip()
    if not formatted.startswith(HEADING_MARKER):
        formatted = f"{DEFAULT_HEADING}\n\n{formatted}"

    lowered = formatted.lower()
    if not any(marker in lowered for marker in FOLLOW_UP_MARKERS):
        formatted = f"{formatted}\n\n{FOLLOW_UP_SECTION}"

    return formatted


def enforce_token_budget(text: str, max_tokens: int) -> int:
    """Return the estimated token count of *text*.

    Raises ``ResponseTooLongError`` above *max_tokens*; the text itself is
    never truncated.
    """
    tokens = estimate_tokens(text)
    if tokens > max_tokens:
        raise ResponseTooLongError()
    return tokens
