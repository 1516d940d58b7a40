"""Path extraction from response bodies.

Two syntaxes are accepted:

- simple paths: ``user.name``, ``items[0].id``, ``matrix[1][0]``, ``items[*]``
- JSONPath expressions starting with ``$``, evaluated with jsonpath_ng
"""

import json
import re
from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

_SEGMENT_PATTERN = re.compile(r"^([^\[]*)((?:\[[^\]]+\])*)$")
_INDEX_PATTERN = re.compile(r"\[([^\]]+)\]")


def parse_path(path: str) -> list[tuple[str, str]]:
    """
    Split a simple path into ("property", name) and ("index", value) parts.

    Examples:
        "user.name" -> [("property", "user"), ("property", "name")]
        "items[0]"  -> [("property", "items"), ("index", "0")]
    """
    parts: list[tuple[str, str]] = []
    for segment in path.split("."):
        if not segment:
            continue
        match = _SEGMENT_PATTERN.match(segment)
        if not match:
            # Unbalanced brackets: treat the whole segment as a key
            parts.append(("property", segment))
            continue
        prop, brackets = match.groups()
        if prop:
            parts.append(("property", prop))
        for index in _INDEX_PATTERN.findall(brackets):
            parts.append(("index", index.strip()))
    return parts


# Returned for a path that does not exist, as opposed to a present JSON null
MISSING = object()


def extract_json_path(data: Any, path: str | None, default: Any = None) -> Any:
    """
    Extract a value from a JSON-like structure.

    Args:
        data: Parsed response body
        path: Simple path or a ``$``-prefixed JSONPath expression
        default: Returned when any part of the path does not match. Pass
            ``MISSING`` to tell a missing path apart from a null value.

    Returns:
        The value found (None for a JSON null), or ``default``
    """
    if not path or path == ".":
        return data

    if path.startswith("$"):
        value = _extract_jsonpath(data, path)
    else:
        value = _walk(data, path[1:] if path.startswith(".") else path)

    return default if value is MISSING else value


def _walk(data: Any, path: str) -> Any:
    current = data

    for kind, value in parse_path(path):
        if kind == "property":
            if isinstance(current, dict):
                if value not in current:
                    return MISSING
                current = current[value]
            elif isinstance(current, list) and value.isdigit():
                # items.0 is accepted as well as items[0]
                index = int(value)
                if index >= len(current):
                    return MISSING
                current = current[index]
            else:
                return MISSING

        elif kind == "index":
            if not isinstance(current, list):
                return MISSING
            if value == "*":
                # Wildcard returns the whole array
                return current
            try:
                index = int(value)
            except ValueError:
                return MISSING
            if not 0 <= index < len(current):
                return MISSING
            current = current[index]

    return current


def _extract_jsonpath(data: Any, expression: str) -> Any:
    try:
        jsonpath_expr = jsonpath_parse(expression)
    except (JsonPathLexerError, JsonPathParserError):
        return MISSING
    matches = jsonpath_expr.find(data)
    return matches[0].value if matches else MISSING


def format_extracted_data(data: Any, pretty: bool = True) -> str:
    """Render an extracted value for display."""
    if data is None:
        return "(null)"
    if isinstance(data, (dict, list)):
        return json.dumps(data, indent=2 if pretty else None)
    return str(data)
