"""Structural preview of raw CSV text for inclusion in a prompt.

Rows are newline-separated and fields comma-separated.  Quoted fields
containing commas are not handled; such rows simply split into more
cells.  This is a preview, not a parser or an analytics step.
"""

import logging

from csvchat.core.service.metrics import CSV_SUMMARY_FALLBACKS_TOTAL

logger = logging.getLogger(__name__)

EMPTY_CSV_MARKER = "Empty CSV file"
SAMPLE_ROW_COUNT = 3
BYTE_ORDER_MARK = "\ufeff"


def _split_row(line: str) -> list[str]:
    return [cell.strip() for cell in line.split(",")]


def _markdown_table(headers: list[str], rows: list[str]) -> str:
    lines = [
        f"| {' | '.join(headers)} |",
        f"| {' | '.join('---' for _ in headers)} |",
    ]
    lines.extend(f"| {' | '.join(_split_row(row))} |" for row in rows)
    return "\n".join(lines)


def _build_report(lines: list[str]) -> str:
    headers = _split_row(lines[0])
    sample = lines[1 : 1 + SAMPLE_ROW_COUNT]
    row_count = len(lines) - 1

    columns = "\n".join(f"{i}. **{name}**" for i, name in enumerate(headers, 1))
    excerpt = "\n".join([f"# First {len(sample)} rows of data", *sample])

    return (
        "## Dataset Overview\n"
        "\n"
        "### Structure\n"
        f"- **Total Records:** `{row_count:,}`\n"
        f"- **Fields:** `{len(headers)}`\n"
        "\n"
        "### Columns\n"
        f"{columns}\n"
        "\n"
        "### Preview\n"
        f"{_markdown_table(headers, sample)}\n"
        "\n"
        "```csv\n"
        f"{excerpt}\n"
        "```"
    )


def summarize_csv(csv_content: str) -> str:
    """Describe *csv_content*: counts, column list, preview table, raw excerpt.

    Returns ``"Empty CSV file"`` for blank input.  If building the report
    fails for any reason the trimmed input is returned unchanged, so a
    malformed upload never aborts the request.
    """
    trimmed = csv_content.strip().lstrip(BYTE_ORDER_MARK).strip()
    if not trimmed:
        return EMPTY_CSV_MARKER

    try:
        # Only "\n" ends a row; form feeds and Unicode separators stay in cells.
        lines = [line.rstrip("\r") for line in trimmed.split("\n")]
        return _build_report(lines)
    except Exception:
        logger.warning(
            "CSV summary failed; passing raw content through (%d chars)",
            len(trimmed),
            exc_info=True,
        )
        CSV_SUMMARY_FALLBACKS_TOTAL.inc()
        return trimmed
