"""Prompt composition for CSV questions.

Section order matters: the system instruction comes first, then the data,
then the conversation, then the question and the answer checklist.
"""

from collections.abc import Sequence

from .models import ROLE_USER, ChatMessage

CHART_FENCE_LANGUAGE = "chart"

SYSTEM_PROMPT = f"""You are an expert data analyst helping a user understand a CSV dataset they uploaded.

Answer using only the dataset overview, preview rows and conversation provided below. If the preview is not enough to answer exactly, say so and explain what you can infer from the columns and sample rows. Never invent columns or values.

Formatting rules:
- Reply in Markdown and start with a level-1 heading that names the topic of the answer.
- Use short sections, bullet lists and tables where they help.
- Quote concrete values, column names and counts from the data.
- Keep the answer focused; prefer a precise answer over a long one.

Charts:
When a chart makes the answer clearer, add a fenced code block tagged `{CHART_FENCE_LANGUAGE}` containing exactly one JSON object:
```{CHART_FENCE_LANGUAGE}
{{"type": "bar", "chartData": [{{"name": "label", "value": 1}}], "options": {{"title": "Chart title"}}}}
```
- "type" is one of: bar, line, pie, scatter, area, radial, radar, treemap.
- "chartData" is a list of objects with a string "name" and a numeric "value".
- "options.title" is optional.
- Emit plain JSON: no comments, no trailing commas, no escaped brackets."""  # noqa: E501

HISTORY_HEADING = "### Conversation History"
HISTORY_SEPARATOR = "\n\n---\n\n"
USER_LABEL = "👤 **User**"
ASSISTANT_LABEL = "🤖 **Assistant**"

QUESTION_PREFIX = "Current Question:"

FOCUS_INSTRUCTIONS = (
    "Focus on:\n"
    "1. Providing accurate analysis\n"
    "2. Including specific data points\n"
    "3. Highlighting key trends\n"
    "4. Making data-driven recommendations\n"
    "5. Suggesting relevant follow-up questions"
)


def truncate_history(
    history: Sequence[ChatMessage], max_messages: int
) -> list[ChatMessage]:
    """Keep the *max_messages* most recent messages, in original order."""
    if max_messages <= 0:
        return []
    return list(history[-max_messages:])


def render_history(history: Sequence[ChatMessage]) -> str:
    """Render *history* as role-labelled blocks, or ``""`` when empty."""
    if not history:
        return ""

    blocks = []
    for msg in history:
        label = USER_LABEL if msg.role == ROLE_USER else ASSISTANT_LABEL
        blocks.append(f"{label}:\n{msg.content.strip()}")

    return f"{HISTORY_HEADING}\n\n{HISTORY_SEPARATOR.join(blocks)}"


def build_prompt(
    system_prompt: str,
    csv_summary: str,
    history: Sequence[ChatMessage],
    question: str,
    max_history: int,
) -> str:
    """Assemble the single prompt sent to the provider.

    History is truncated here and only here.
    """
    sections = [system_prompt, csv_summary]

    rendered = render_history(truncate_history(history, max_history))
    if rendered:
        sections.append(rendered)

    sections.append(f"{QUESTION_PREFIX} {question}")
    sections.append(FOCUS_INSTRUCTIONS)
    return "\n\n".join(sections)
