"""Locate and parse a JSON object embedded in generated prose.

Generated replies often wrap the requested object in commentary or code
fences. The scan below finds the first balanced ``{...}`` span, tracking
string literals so braces inside strings do not count.
"""

import re
from typing import Any

import orjson

from sommelier_service.exceptions import MalformedGenerationOutput

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def find_json_object(text: str) -> str | None:
    """Return the first balanced brace-delimited substring, or None."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        # Unbalanced from this opening brace; try the next one.
        start = text.find("{", start + 1)
    return None


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the first embedded JSON object in ``text``.

    Raises:
        MalformedGenerationOutput: no object found, or it does not parse.
    """
    candidate = find_json_object(text)
    if candidate is None:
        raise MalformedGenerationOutput("No JSON object found in generated output")

    # Fix trailing commas (common LLM JSON error)
    candidate = _TRAILING_COMMA.sub(r"\1", candidate)
    try:
        parsed = orjson.loads(candidate)
    except orjson.JSONDecodeError as e:
        raise MalformedGenerationOutput(f"Generated JSON does not parse: {e}") from e
    if not isinstance(parsed, dict):
        raise MalformedGenerationOutput("Generated JSON is not an object")
    return parsed
