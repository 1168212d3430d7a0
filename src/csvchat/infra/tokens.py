"""Lightweight token estimation.

A word-count heuristic, not a tokenizer.  It over-counts English prose
somewhat, which keeps the response budget on the strict side.
"""

import math

TOKENS_PER_WORD = 1.5


def estimate_tokens(text: str) -> int:
    """Return ``ceil(word_count * 1.5)`` for *text*."""
    return math.ceil(len(text.split()) * TOKENS_PER_WORD)
