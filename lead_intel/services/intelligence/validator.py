"""
Lead Validator - ask the LLM whether each lead is a real person.

Leads are sent in fixed-size batches. A batch whose call or parse fails keeps
every lead (is_valid_person = True) with a default reason; validation never
drops leads itself. Filtering on the flag is the caller's decision.
"""

from typing import Any, Dict, List, Optional

from ..config import EnrichmentSettings, get_settings
from ..providers.base import BaseLLMProvider
from ..rate_limiter import RateLimiter
from .json_parsing import ParseFailure, parse_json_response

DEFAULT_KEPT_REASON = "Validation failed, kept by default"

FALSE_STRINGS = ("false", "no", "0")

VALIDATION_PROMPT = """Validate these lead profiles to determine if they represent REAL PEOPLE or should be filtered out.

FILTER OUT if:
- Name is a company name (e.g., "BNP Paribas", "Societe Generale")
- Name is generic (e.g., "Professional", "Manager", "Director")
- Name contains company identifiers (e.g., "BNP Paribas'", "France", organization names)
- Name is clearly not a person's first/last name

KEEP if:
- Name appears to be a real person's first and last name
- Has realistic personal details that match a real individual

LEADS TO VALIDATE (index starts at 0):
{leads}

Respond with ONLY a JSON object:
{{
  "validations": [
    {{"index": 0, "is_valid_person": true, "reason": "Real person name"}},
    {{"index": 1, "is_valid_person": false, "reason": "Company name, not a person"}}
  ]
}}"""


def format_batch(batch: List[Dict[str, Any]]) -> str:
    lines = []
    for idx, lead in enumerate(batch):
        lines.append(
            f'{idx}. Name: "{lead.get("name") or ""}"\n'
            f'   Title: {lead.get("title") or "Unknown"}\n'
            f'   Company: {lead.get("company") or "Unknown"}'
        )
    return "\n".join(lines)


def _extract_validations(value: Any) -> Optional[List[Dict[str, Any]]]:
    if isinstance(value, dict):
        value = value.get("validations")
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, dict)]


def _as_flag(value: Any) -> bool:
    """Model verdict as a bool; missing means valid, "false"/"no"/"0" strings mean invalid."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


class LeadValidator:
    """Batches leads through the LLM person check."""

    def __init__(
        self,
        llm: BaseLLMProvider,
        settings: Optional[EnrichmentSettings] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        self.llm = llm
        self.settings = settings or get_settings()
        self.batch_size = max(1, self.settings.validation_batch_size)
        self.limiter = limiter or RateLimiter(self.settings.validation_delay, name="validator")

    def _keep_by_default(self, batch: List[Dict[str, Any]]) -> None:
        for lead in batch:
            lead.update({"is_valid_person": True, "validation_reason": DEFAULT_KEPT_REASON})

    async def _validate_batch(self, batch: List[Dict[str, Any]], batch_number: int) -> Dict[str, int]:
        counts = {"valid": 0, "invalid": 0, "defaulted": 0}

        try:
            raw = await self.llm.complete(
                VALIDATION_PROMPT.format(leads=format_batch(batch)),
                json_mode=True,
                temperature=0.1,
                max_tokens=600,
            )
        except Exception as e:
            print(f"[Validator] LLM error for batch {batch_number}: {e}", flush=True)
            self._keep_by_default(batch)
            counts["defaulted"] = len(batch)
            return counts

        parsed = parse_json_response(raw)
        validations = None if isinstance(parsed, ParseFailure) else _extract_validations(parsed.value)
        if validations is None:
            reason = parsed.reason if isinstance(parsed, ParseFailure) else "missing validations list"
            print(f"[Validator] Unparseable response for batch {batch_number}: {reason}", flush=True)
            self._keep_by_default(batch)
            counts["defaulted"] = len(batch)
            return counts

        answered = set()
        for validation in validations:
            idx = validation.get("index")
            if not isinstance(idx, int) or isinstance(idx, bool) or not 0 <= idx < len(batch):
                continue
            lead = batch[idx]
            is_valid = validation.get("is_valid_person")
            is_valid = _as_flag(is_valid)
            lead.update({
                "is_valid_person": is_valid,
                "validation_reason": validation.get("reason") or ("Real person" if is_valid else "Not a person"),
            })
            answered.add(idx)
            mark = "+" if is_valid else "-"
            print(f"  {mark} {lead.get('name')} - {lead['validation_reason']}", flush=True)
            counts["valid" if is_valid else "invalid"] += 1

        # Leads the model skipped are kept
        for idx, lead in enumerate(batch):
            if idx not in answered:
                lead.update({"is_valid_person": True, "validation_reason": DEFAULT_KEPT_REASON})
                counts["defaulted"] += 1

        return counts

    async def validate_leads(self, leads: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Set is_valid_person / validation_reason on every lead.

        Args:
            leads: Leads to check (mutated in place)

        Returns:
            The same list
        """
        if not isinstance(leads, list):
            raise TypeError(f"leads must be a list, got {type(leads).__name__}")
        if not leads:
            return leads

        print(f"[Validator] Validating {len(leads)} leads in batches of {self.batch_size}", flush=True)
        totals = {"valid": 0, "invalid": 0, "defaulted": 0}

        for start in range(0, len(leads), self.batch_size):
            await self.limiter.wait()
            batch = leads[start:start + self.batch_size]
            counts = await self._validate_batch(batch, start // self.batch_size + 1)
            for key, value in counts.items():
                totals[key] += value

        print(
            f"[Validator] Done: {totals['valid']} valid, {totals['invalid']} filtered, "
            f"{totals['defaulted']} kept by default",
            flush=True,
        )
        return leads
