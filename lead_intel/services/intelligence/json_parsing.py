"""
JSON parsing for model output.

Two stages: normalize the raw text (strip markdown code fences, surrounding
prose), then parse strictly and check the top-level shape. The result is a
ParseOk or a ParseFailure value; nothing here raises on bad model output.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Type, Union

FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)
TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


@dataclass
class ParseOk:
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass
class ParseFailure:
    reason: str
    raw: str = ""

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[ParseOk, ParseFailure]


def strip_code_fences(text: str) -> str:
    """Remove a wrapping ```json ... ``` block if present."""
    text = (text or "").strip()
    match = FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


def _outermost_span(text: str) -> Optional[str]:
    """First '{' or '[' through the matching last closer, if any."""
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None
    start = min(starts)
    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end <= start:
        return None
    return text[start:end + 1]


def parse_json_response(
    raw: Optional[str],
    expect: Union[Type, Tuple[Type, ...]] = (dict, list),
) -> ParseResult:
    """
    Parse model output as JSON.

    Args:
        raw: Raw model text
        expect: Allowed type(s) for the top-level value

    Returns:
        ParseOk(value) or ParseFailure(reason, raw)
    """
    if raw is None or not str(raw).strip():
        return ParseFailure("Empty response", raw or "")

    text = strip_code_fences(str(raw))
    candidates = [text]
    span = _outermost_span(text)
    if span and span != text:
        candidates.append(span)

    last_error = "No JSON found"
    for candidate in candidates:
        for attempt in (candidate, TRAILING_COMMA_RE.sub(r"\1", candidate)):
            try:
                value = json.loads(attempt)
            except json.JSONDecodeError as e:
                last_error = f"Invalid JSON: {e.msg}"
                continue
            if not isinstance(value, expect):
                return ParseFailure(f"Unexpected JSON type: {type(value).__name__}", str(raw))
            return ParseOk(value)

    return ParseFailure(last_error, str(raw))
