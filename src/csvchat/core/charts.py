"""Chart blocks embedded in answers.

The model is asked to emit charts as fenced blocks tagged ``chart`` whose
body is one JSON object::

    ```chart
    {"type": "bar", "chartData": [{"name": "Q1", "value": 10}],
     "options": {"title": "Sales"}}
    ```

Models frequently over-escape that JSON (``\\[``, ``\\"``), so parsing goes
through ``safe_json_parse``, which tries progressively blunter repairs and
returns ``None`` instead of raising.
"""

import json
import logging
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

ChartType = Literal["bar", "line", "pie", "scatter", "area", "radial", "radar", "treemap"]

CHART_BLOCK_PATTERN = re.compile(r"```chart[ \t]*\r?\n(.*?)```", re.DOTALL)

_BACKSLASHES_BEFORE_JSON = re.compile(r'\\+(?=["\[{\\])')

_UNESCAPES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r'\\"'), '"'),
    (re.compile(r"\\{"), "{"),
    (re.compile(r"\\}"), "}"),
    (re.compile(r"\\\["), "["),
    (re.compile(r"\\\]"), "]"),
    (re.compile(r"\\\\"), r"\\"),
    (re.compile(r"\\n"), "\n"),
    (re.compile(r"\\r"), "\r"),
    (re.compile(r"\\t"), "\t"),
)


class ChartPoint(BaseModel):
    """One data point: a category label and its value."""

    # Years and IDs often arrive as bare numbers.
    model_config = ConfigDict(coerce_numbers_to_str=True, allow_inf_nan=False)

    name: str
    value: float


class ChartOptions(BaseModel):
    title: str | None = None


class ChartSpec(BaseModel):
    """Validated chart block."""

    model_config = ConfigDict(populate_by_name=True)

    type: ChartType
    chart_data: list[ChartPoint] = Field(alias="chartData")
    options: ChartOptions = Field(default_factory=ChartOptions)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _loads(raw: str) -> tuple[bool, Any]:
    """Strict JSON: NaN and Infinity are rejected, deep nesting fails softly."""
    try:
        return True, json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError):
        return False, None


def safe_json_parse(raw: str) -> Any | None:
    """Parse *raw* as JSON, repairing common over-escaping.

    Attempts, in order: the text as is; when it contains ``\\[``, the text
    with backslash runs before quotes/brackets/braces removed; the text
    with the standard escape sequences unescaped; the text with every
    backslash removed and quoted arrays unquoted.  Returns ``None`` when
    all of them fail.
    """
    ok, value = _loads(raw)
    if ok:
        return value

    if "\\[" in raw:
        logger.debug("Detected escaped brackets, attempting to fix")
        ok, value = _loads(_BACKSLASHES_BEFORE_JSON.sub("", raw))
        if ok:
            return value

    fixed = raw
    for pattern, replacement in _UNESCAPES:
        fixed = pattern.sub(replacement, fixed)
    ok, value = _loads(fixed)
    if ok:
        return value

    sanitized = raw.replace("\\", "").replace('"[', "[").replace(']"', "]")
    ok, value = _loads(sanitized)
    if ok:
        return value

    logger.warning("All JSON parsing attempts failed for chart block")
    return None


def extract_chart_blocks(text: str) -> list[str]:
    """Return the raw bodies of every ```chart fence in *text*."""
    return [match.strip() for match in CHART_BLOCK_PATTERN.findall(text)]


def parse_chart_block(raw: str) -> ChartSpec | None:
    """Parse and validate one chart block body; ``None`` if unusable."""
    data = safe_json_parse(raw)
    if not isinstance(data, dict):
        return None
    try:
        return ChartSpec.model_validate(data)
    except ValidationError as exc:
        logger.warning("Invalid chart block: %s", exc.errors(include_url=False))
        return None
