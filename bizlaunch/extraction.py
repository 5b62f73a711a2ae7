"""Pull a JSON value out of free-form model output.

Models asked for JSON often wrap it in prose or a ```json fence.  The
extraction takes the widest bracketed region (first opening bracket to the
last closing one) and parses it.  Callers decide whether a failure is fatal
(``extract_json``) or degrades to a default (``extract_json_or``).
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any


class JsonShape(Enum):
    ARRAY = (re.compile(r"\[[\s\S]*\]"), list)
    OBJECT = (re.compile(r"\{[\s\S]*\}"), dict)

    def __init__(self, pattern: re.Pattern[str], python_type: type) -> None:
        self.pattern = pattern
        self.python_type = python_type


class JsonExtractionError(ValueError):
    """The text holds no parseable JSON value of the requested shape."""


def extract_json(text: str | None, shape: JsonShape) -> Any:
    """Return the list/dict embedded in *text*, or raise JsonExtractionError."""
    if not text:
        raise JsonExtractionError("Empty model response")

    match = shape.pattern.search(text)
    if match is None:
        raise JsonExtractionError(f"No JSON {shape.name.lower()} found in model response")

    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise JsonExtractionError(f"Invalid JSON in model response: {exc}") from exc

    if not isinstance(value, shape.python_type):
        raise JsonExtractionError(f"Expected a JSON {shape.name.lower()}")
    return value


def extract_json_or(text: str | None, shape: JsonShape, default: Any) -> Any:
    """Like :func:`extract_json` but returns *default* on any failure."""
    try:
        return extract_json(text, shape)
    except JsonExtractionError:
        return default
