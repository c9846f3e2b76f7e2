"""Project Brief contracts: what a caller submits to request a plan."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional


class ProjectBrief(BaseModel):
    """Caller-supplied description of a project idea.

    Immutable once built; the same brief always renders the same request.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10, max_length=5000)
    problem_statement: str = Field(..., min_length=10, max_length=5000)
    target_users: Optional[int] = Field(None, ge=1, le=1_000_000_000, description="Expected number of users")
    team_size: Optional[int] = Field(None, ge=1, le=1000, description="Number of developers")
    timeline_weeks: Optional[int] = Field(None, ge=1, le=520, description="Desired timeline in weeks")
    budget_range: Optional[str] = Field(None, max_length=50, description="Budget tag, e.g. '0-5k' or '100k+'")
    is_public: bool = Field(True, description="Whether anyone with the link may read the project")


class ProjectUpdate(BaseModel):
    """Owner-editable fields of a stored project. The slug never changes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    problem_statement: Optional[str] = Field(None, min_length=10, max_length=5000)
    target_users: Optional[int] = Field(None, ge=1, le=1_000_000_000)
    team_size: Optional[int] = Field(None, ge=1, le=1000)
    budget_range: Optional[str] = Field(None, max_length=50)
    is_public: Optional[bool] = None

    def changes(self) -> dict:
        """Only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True)
