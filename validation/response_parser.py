"""Turn raw generator text into a validated plan.

Two failure kinds, never a partial plan:
- MalformedResponse: the text is not JSON at all (decoder message kept verbatim)
- InvalidPlan: JSON, but at least one section breaks the contract
"""

import json
import re
from typing import Any, Iterable, List

from contracts.plan_contracts import PlanDocument
from validation.plan_validator import Violation, validate_plan


# A single fence wrapping the whole reply, with an optional language tag
_FENCED = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class ParseFailure(Exception):
    """Base class for generator output that cannot be trusted."""
    kind = "parse_failure"


class MalformedResponse(ParseFailure):
    """The generator output is not decodable JSON."""
    kind = "malformed"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPlan(ParseFailure):
    """The generator output is JSON but violates the plan contract."""
    kind = "invalid"

    def __init__(self, invalid_sections: Iterable[str], violations: Iterable[Violation] = ()):
        self.invalid_sections: List[str] = list(invalid_sections)
        self.violations: List[Violation] = list(violations)
        super().__init__(
            "Plan is missing or has invalid sections: " + ", ".join(self.invalid_sections)
        )


def strip_code_fence(text: str) -> str:
    """Remove one Markdown code fence wrapping the entire text, if present."""
    stripped = text.strip()
    match = _FENCED.match(stripped)
    return match.group(1).strip() if match else stripped


def decode_response(raw_text: str) -> Any:
    """Decode raw generator text into a generic JSON value.

    Raises:
        MalformedResponse: If the text is not valid JSON, or cannot be decoded
            (nesting too deep, integer literal too long)
    """
    try:
        return json.loads(strip_code_fence(raw_text or ""))
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(str(e)) from e


def parse_plan_response(raw_text: str) -> PlanDocument:
    """Decode and validate raw generator text.

    Args:
        raw_text: Untrusted text returned by the model

    Returns:
        The validated PlanDocument

    Raises:
        MalformedResponse: If the text is not valid JSON
        InvalidPlan: If the JSON breaks the plan contract
    """
    decoded = decode_response(raw_text)
    report = validate_plan(decoded)
    if not report.ok:
        raise InvalidPlan(report.invalid_sections, report.violations)
    return report.document
