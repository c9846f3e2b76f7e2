"""Structural validation of generated plans.

The plan is checked as an ordered sequence of independent section validators,
one per top-level key. Each section validator returns the typed value or the
violations it found; the runner collects every violation before deciding, so a
rejected plan reports all of its problems at once. Validation never raises and
never accepts a partially valid plan.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from contracts.plan_contracts import (
    DatabaseSchema,
    KeyFeatures,
    NonEmptyStr,
    PlanDocument,
    PlanMetadata,
    Risks,
    Roadmap,
    TechStack,
)


SECTION_ORDER: Tuple[str, ...] = (
    "metadata",
    "techStack",
    "databaseSchema",
    "risks",
    "roadmap",
    "keyFeatures",
    "executiveSummary",
)

_JSON_TYPE_NAMES = {
    "dict": "object",
    "list": "array",
    "str": "string",
    "int": "number",
    "float": "number",
    "bool": "boolean",
    "NoneType": "null",
}


@dataclass(frozen=True)
class Violation:
    """A single broken rule: where it broke and what was expected."""
    path: str
    expectation: str

    @property
    def section(self) -> str:
        """Top-level key the path starts in."""
        return re.split(r"[.\[]", self.path, maxsplit=1)[0]

    def __str__(self) -> str:
        return f"{self.path}: {self.expectation}"


@dataclass
class ValidationReport:
    """Outcome of validating one decoded plan."""
    document: Optional[PlanDocument] = None
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.document is not None and not self.violations

    @property
    def invalid_sections(self) -> List[str]:
        """Sections with at least one violation, in contract order."""
        broken = {v.section for v in self.violations}
        return [s for s in SECTION_ORDER if s in broken]


def _format_path(section: str, loc: Sequence[Any]) -> str:
    path = section
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else f".{part}"
    return path


class SectionValidator:
    """Validates one top-level key of a plan in isolation."""

    def __init__(self, key: str, annotation: Any):
        self.key = key
        self.annotation = annotation
        self._adapter = TypeAdapter(annotation)

    def __call__(self, payload: Mapping[str, Any]) -> Tuple[Any, List[Violation]]:
        if self.key not in payload:
            return None, [Violation(self.key, "required section is missing")]
        try:
            return self._adapter.validate_python(payload[self.key]), []
        except ValidationError as e:
            return None, [
                Violation(_format_path(self.key, err["loc"]), err["msg"])
                for err in e.errors()
            ]


PLAN_SECTIONS: Tuple[SectionValidator, ...] = (
    SectionValidator("metadata", PlanMetadata),
    SectionValidator("techStack", TechStack),
    SectionValidator("databaseSchema", DatabaseSchema),
    SectionValidator("risks", Risks),
    SectionValidator("roadmap", Roadmap),
    SectionValidator("keyFeatures", KeyFeatures),
    SectionValidator("executiveSummary", NonEmptyStr),
)


def validate_plan(
    decoded: Any,
    sections: Sequence[SectionValidator] = PLAN_SECTIONS,
) -> ValidationReport:
    """Check a decoded value against the Plan Document contract.

    Args:
        decoded: Any value produced by a JSON decoder
        sections: Section validators to run, in order

    Returns:
        ValidationReport holding either the typed document or every violation
    """
    if not isinstance(decoded, Mapping):
        got = _JSON_TYPE_NAMES.get(type(decoded).__name__, type(decoded).__name__)
        return ValidationReport(violations=[
            Violation(s.key, f"expected a JSON object at the top level, got {got}")
            for s in sections
        ])

    values: Dict[str, Any] = {}
    violations: List[Violation] = []
    for validate_section in sections:
        value, problems = validate_section(decoded)
        if problems:
            violations.extend(problems)
        else:
            values[validate_section.key] = value

    if violations:
        return ValidationReport(violations=violations)

    try:
        document = PlanDocument.model_validate(values)
    except ValidationError as e:
        return ValidationReport(violations=[
            Violation(_format_path("", err["loc"]).lstrip("."), err["msg"])
            for err in e.errors()
        ])
    return ValidationReport(document=document)
