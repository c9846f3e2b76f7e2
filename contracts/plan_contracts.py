"""Plan Document contracts.

The typed shape of a generated plan. Wire keys are camelCase (as the model is
instructed to emit them), attributes are snake_case. Primitive fields are
strict: no string-to-number coercion, booleans are not numbers, non-finite
numbers are rejected, and enum values are matched exactly.
"""

from datetime import datetime
from enum import Enum
import re
from typing import Annotated, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    Strict,
    StringConstraints,
)
from pydantic.alias_generators import to_camel


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def _not_bool(value):
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


_DATE_TIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}(:?\d{2})?)?$"
)


def _date_time(value: str) -> str:
    if not _DATE_TIME.match(value):
        raise ValueError("must be an ISO 8601 date-time")
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        datetime.fromisoformat(normalized)
    except ValueError as e:
        raise ValueError(f"must be an ISO 8601 date-time ({e})") from e
    return value


NonEmptyStr = Annotated[str, Strict(), StringConstraints(min_length=1), AfterValidator(_not_blank)]
PlainStr = Annotated[str, Strict()]
StrictFlag = Annotated[bool, Strict()]
NonNegativeNumber = Annotated[float, Strict(), Field(ge=0, allow_inf_nan=False), BeforeValidator(_not_bool)]
Percentage = Annotated[float, Strict(), Field(ge=0, le=100, allow_inf_nan=False), BeforeValidator(_not_bool)]
DateTimeStr = Annotated[str, Strict(), AfterValidator(_date_time)]


class AnalysisDepth(str, Enum):
    """How much input the generator had to work with."""
    BASIC = "basic"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class RelationType(str, Enum):
    """Cardinality of a schema relationship."""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"
    MANY_TO_ONE = "many-to-one"


class RiskSeverity(str, Enum):
    """Severity of a project risk."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RiskCategory(str, Enum):
    """Area a project risk belongs to."""
    TECHNICAL = "Technical"
    BUSINESS = "Business"
    TIMELINE = "Timeline"
    BUDGET = "Budget"
    TEAM = "Team"


class FeaturePriority(str, Enum):
    """MoSCoW-style priority of a key feature."""
    P0 = "P0"  # Must-have
    P1 = "P1"  # Should-have
    P2 = "P2"  # Nice-to-have


class Complexity(str, Enum):
    """Implementation complexity of a key feature."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class PlanModel(BaseModel):
    """Base for every plan section: camelCase wire keys only, immutable instances."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        frozen=True,
    )


class PlanMetadata(PlanModel):
    """How confident the generator is and what it changed from the brief."""
    confidence_score: Percentage = Field(..., description="0-100 feasibility/clarity score")
    analysis_depth: AnalysisDepth
    generated_at: DateTimeStr = Field(..., description="ISO 8601 timestamp")
    adjustments_made: List[PlainStr] = Field(..., description="Changes made to the brief's inputs")


class TechStack(PlanModel):
    """Recommended technologies per layer."""
    frontend: Optional[List[PlainStr]] = None
    backend: Optional[List[PlainStr]] = None
    database: Optional[List[PlainStr]] = None
    devops: Optional[List[PlainStr]] = None
    rationale: NonEmptyStr


class ForeignKeyRef(PlanModel):
    table: NonEmptyStr
    column: NonEmptyStr


class DatabaseColumn(PlanModel):
    name: NonEmptyStr
    data_type: NonEmptyStr = Field(..., alias="type")
    nullable: StrictFlag
    primary_key: Optional[StrictFlag] = None
    foreign_key: Optional[ForeignKeyRef] = None


class DatabaseTable(PlanModel):
    name: NonEmptyStr
    columns: List[DatabaseColumn]


class DatabaseRelationship(PlanModel):
    from_table: NonEmptyStr = Field(..., alias="from")
    to_table: NonEmptyStr = Field(..., alias="to")
    relation_type: RelationType = Field(..., alias="type")


class DatabaseSchema(PlanModel):
    """Starter relational schema for the project."""
    tables: List[DatabaseTable]
    relationships: List[DatabaseRelationship]


class Risk(PlanModel):
    title: NonEmptyStr
    description: NonEmptyStr
    severity: RiskSeverity
    mitigation: NonEmptyStr
    category: RiskCategory


class RoadmapPhase(PlanModel):
    name: NonEmptyStr
    duration: NonEmptyStr = Field(..., description="Human label, e.g. '3 weeks'")
    tasks: List[NonEmptyStr] = Field(..., min_length=1)
    deliverables: List[NonEmptyStr] = Field(..., min_length=1)
    skills_required: List[NonEmptyStr] = Field(..., min_length=1)


class Roadmap(PlanModel):
    """Phased delivery plan; its timeline overrides the brief's estimate."""
    adjusted_timeline_weeks: NonNegativeNumber
    phases: List[RoadmapPhase] = Field(..., min_length=1)


class KeyFeature(PlanModel):
    feature: NonEmptyStr
    description: NonEmptyStr
    priority: FeaturePriority
    complexity: Complexity
    estimated_days: NonNegativeNumber


Risks = Annotated[List[Risk], Field(min_length=1)]
KeyFeatures = Annotated[List[KeyFeature], Field(min_length=1)]


class PlanDocument(PlanModel):
    """A complete, validated generated plan.

    Only ``validation.validate_plan`` should produce these from model output;
    every other component may assume the shape holds.
    """
    metadata: PlanMetadata
    tech_stack: TechStack
    database_schema: DatabaseSchema
    risks: Risks
    roadmap: Roadmap
    key_features: KeyFeatures
    executive_summary: NonEmptyStr

    def to_wire(self) -> dict:
        """Dump as the camelCase JSON-compatible dict the model emits."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
