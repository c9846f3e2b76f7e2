"""Trust boundary for generator output: decoding and structural validation."""

from .plan_validator import (
    SECTION_ORDER,
    PLAN_SECTIONS,
    SectionValidator,
    ValidationReport,
    Violation,
    validate_plan,
)
from .response_parser import (
    InvalidPlan,
    MalformedResponse,
    ParseFailure,
    decode_response,
    parse_plan_response,
    strip_code_fence,
)

__all__ = [
    "SECTION_ORDER",
    "PLAN_SECTIONS",
    "SectionValidator",
    "ValidationReport",
    "Violation",
    "validate_plan",
    "InvalidPlan",
    "MalformedResponse",
    "ParseFailure",
    "decode_response",
    "parse_plan_response",
    "strip_code_fence",
]
