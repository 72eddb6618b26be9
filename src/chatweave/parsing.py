"""Helpers for mining JSON out of free-text model responses."""

import json
from typing import Any

from .errors import ToolParseError


def find_json_object(text: str) -> str | None:
    """Return the first top-level ``{...}`` span in ``text``.

    Braces are matched by depth; braces inside JSON string literals
    (including escaped quotes) are ignored. Returns None if no balanced
    object is found.
    """
    start = text.find("{")
    while start != -1:
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
                continue

            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the first top-level JSON object embedded in ``text``.

    Raises:
        ToolParseError: If no object is found or it is not valid JSON
    """
    span = find_json_object(text)
    if span is None:
        raise ToolParseError("No JSON object found in response")
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise ToolParseError(f"Invalid JSON in response: {e}") from e
    if not isinstance(data, dict):
        raise ToolParseError("Response JSON is not an object")
    return data
