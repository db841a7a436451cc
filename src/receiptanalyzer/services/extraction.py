"""Recovery of the expense array embedded in free-form model output.

Models wrap the requested JSON in prose or markdown code fences. Extraction is
split in two stages that can be exercised separately: locating the first
array-shaped span, then parsing that span strictly as JSON.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from receiptanalyzer.core.exceptions import ExtractionError, JSONParseError
from receiptanalyzer.models.expense import ExpenseCategory

logger = logging.getLogger(__name__)

_SHORTEST_ARRAY_PATTERN = re.compile(r"\[.*?\]", re.DOTALL)
_CATEGORY_VALUES = frozenset(category.value for category in ExpenseCategory)


def extract_first_array_span(text: str) -> str | None:
    """Return the first ``[`` ... ``]`` span in ``text``, or None.

    The span starts at the first ``[`` and ends where the bracket depth
    returns to zero, so nested arrays such as ``"items": [...]`` stay inside
    it. Brackets inside JSON string literals are ignored. When the brackets
    never balance, the shortest ``[`` ... ``]`` span is returned instead.
    """
    start = text.find("[")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]

    match = _SHORTEST_ARRAY_PATTERN.search(text)
    return match.group(0) if match else None


def parse_expense_array(content: Any) -> list[Any]:  # noqa: ANN401
    """Parse the first array-shaped span of the model reply as JSON.

    Args:
        content: ``choices[0].message.content`` of the vision API reply

    Returns:
        The decoded array. Element shapes are not validated.

    Raises:
        ExtractionError: If the reply contains no array-shaped span
        JSONParseError: If the span is not valid JSON
    """
    text = content if isinstance(content, str) else ""

    span = extract_first_array_span(text)
    if span is None:
        logger.warning("No JSON array found in model reply: %s", text)
        raise ExtractionError(text)

    try:
        return json.loads(span)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning("Failed to parse JSON array from model reply: %s", e)
        raise JSONParseError(text, str(e)) from e


def normalize_categories(data: list[Any]) -> list[Any]:
    """Rewrite unknown ``category`` values to the "other" category.

    Only object elements with a ``category`` outside the fixed taxonomy are
    changed; everything else is returned as is.
    """
    normalized: list[Any] = []
    for element in data:
        if isinstance(element, dict) and "category" in element:
            category = element["category"]
            if not isinstance(category, str) or category not in _CATEGORY_VALUES:
                logger.warning(
                    "Unknown expense category %r, using %s",
                    category,
                    ExpenseCategory.OTHER.value,
                )
                element = {**element, "category": ExpenseCategory.OTHER.value}
        normalized.append(element)
    return normalized
