"""Result type for parsing LLM completions as JSON.

Wraps the parse-or-fallback pattern so callers state the fallback
explicitly with ``unwrap_or_default`` instead of a try/except.
"""

import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class JsonParseError(Exception):
    """Raised (or carried) when completion text is not the expected JSON."""

    pass


@dataclass(frozen=True)
class JsonResult(Generic[T]):
    """Either a parsed value or the error that prevented parsing."""

    value: T | None = None
    error: Exception | None = None

    @classmethod
    def ok(cls, value: T) -> "JsonResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: Exception) -> "JsonResult[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or_default(self, fallback: T) -> T:
        """Return the value, or ``fallback`` when parsing failed."""
        if self.error is not None:
            return fallback
        return self.value  # type: ignore[return-value]


def parse_json_object(text: str | None) -> JsonResult[dict[str, Any]]:
    """Parse completion text that must be a single JSON object.

    Args:
        text: Raw completion content

    Returns:
        JsonResult holding the dict, or a JsonParseError
    """
    if not text:
        return JsonResult.fail(JsonParseError("Empty completion"))
    try:
        parsed = json.loads(text)
    except ValueError as e:
        return JsonResult.fail(JsonParseError(f"Invalid JSON: {e}"))
    if not isinstance(parsed, dict):
        return JsonResult.fail(JsonParseError("Completion is not a JSON object"))
    return JsonResult.ok(parsed)


def extract_json_object(text: str | None) -> JsonResult[dict[str, Any]]:
    """Parse the substring between the first ``{`` and the last ``}``.

    Tolerates prose the model emits around the JSON body.
    """
    if not text:
        return JsonResult.fail(JsonParseError("Empty completion"))
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return JsonResult.fail(JsonParseError("No JSON object in completion"))
    return parse_json_object(text[start : end + 1])


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences and ``//`` line comments from JSON text."""
    lines = []
    for line in text.strip().splitlines():
        if line.strip().startswith("```"):
            continue
        comment_at = line.find("// ")
        if comment_at != -1 and '"' not in line[comment_at:]:
            line = line[:comment_at]
        lines.append(line)
    return "\n".join(lines).strip()
