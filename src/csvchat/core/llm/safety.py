"""Content-safety settings for the Google Generative AI provider."""

from collections.abc import Sequence

from langchain_google_genai import HarmBlockThreshold, HarmCategory

from csvchat.configs.config import ConfigError
from csvchat.configs.system import SafetySetting

CATEGORY_PREFIX = "HARM_CATEGORY_"


def _category(name: str) -> HarmCategory:
    key = name.strip().upper()
    if not key.startswith(CATEGORY_PREFIX):
        key = CATEGORY_PREFIX + key
    try:
        return HarmCategory[key]
    except KeyError:
        raise ConfigError(f"Unknown harm category: {name!r}") from None


def _threshold(name: str) -> HarmBlockThreshold:
    try:
        return HarmBlockThreshold[name.strip().upper()]
    except KeyError:
        raise ConfigError(f"Unknown block threshold: {name!r}") from None


def to_google_safety_settings(
    settings: Sequence[SafetySetting],
) -> dict[HarmCategory, HarmBlockThreshold]:
    """Translate config entries into the mapping ``ChatGoogleGenerativeAI`` takes.

    A later entry for the same category overrides an earlier one.
    """
    return {_category(s.category): _threshold(s.threshold) for s in settings}
