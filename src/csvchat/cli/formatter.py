"""Terminal rendering of answers, including chart blocks."""

from typing import TextIO

from csvchat.core.charts import CHART_BLOCK_PATTERN, ChartSpec, parse_chart_block

BAR_WIDTH = 40
BAR_CHAR = "█"
LABEL_WIDTH = 18


def render_chart(spec: ChartSpec, width: int = BAR_WIDTH) -> str:
    """Draw *spec* as horizontal bars scaled to the largest absolute value."""
    lines: list[str] = []
    if spec.options.title:
        lines.append(spec.options.title)
    lines.append(f"[{spec.type} chart]")

    if not spec.chart_data:
        lines.append("(no data)")
        return "\n".join(lines)

    peak = max(abs(point.value) for point in spec.chart_data) or 1.0
    label_width = min(
        LABEL_WIDTH, max(len(point.name) for point in spec.chart_data)
    )
    for point in spec.chart_data:
        bar = BAR_CHAR * round(abs(point.value) / peak * width)
        label = point.name[:label_width].ljust(label_width)
        lines.append(f"{label} {bar} {point.value:g}")
    return "\n".join(lines)


def render_answer(text: str) -> str:
    """Replace every chart fence in *text* with its text rendering."""

    def _replace(match) -> str:
        spec = parse_chart_block(match.group(1).strip())
        if spec is None:
            return "(chart could not be displayed: invalid chart data)"
        return render_chart(spec)

    return CHART_BLOCK_PATTERN.sub(_replace, text)


class ResponseFormatter:
    """Writes answers and errors to an output stream."""

    def __init__(self, output: TextIO):
        self.output = output

    def show_answer(self, text: str) -> None:
        self._print(f"\n{render_answer(text)}\n")

    def show_error(self, message: str, status_code: int | None = None) -> None:
        prefix = f"[{status_code}] " if status_code else ""
        self._print(f"\n❌ Error: {prefix}{message}\n")

    def _print(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()
