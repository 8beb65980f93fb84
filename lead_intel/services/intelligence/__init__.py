# LLM-backed services: JSON parsing, person validation, intelligence extraction
from .json_parsing import ParseOk, ParseFailure, parse_json_response, strip_code_fences
from .validator import LeadValidator, DEFAULT_KEPT_REASON
from .summarizer import (
    IntelligenceSummarizer,
    build_context,
    normalize_intelligence,
    TRUNCATION_MARKER,
    CONTENT_SEPARATOR,
)

__all__ = [
    "ParseOk",
    "ParseFailure",
    "parse_json_response",
    "strip_code_fences",
    "LeadValidator",
    "DEFAULT_KEPT_REASON",
    "IntelligenceSummarizer",
    "build_context",
    "normalize_intelligence",
    "TRUNCATION_MARKER",
    "CONTENT_SEPARATOR",
]
