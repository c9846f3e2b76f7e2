"""Stored project contracts.

``ProjectDraft`` is everything the persister hands the store for an insert;
``ProjectRecord`` is the read model the store hands back. Plan sections are
stored as their camelCase wire form.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .brief_contracts import ProjectBrief
from .plan_contracts import PlanDocument


class ProjectDraft(BaseModel):
    """Column values for a new project, minus the slug and system counters."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = None
    title: str
    description: str
    problem_statement: str
    is_public: bool = True
    target_users: Optional[int] = None
    team_size: Optional[int] = None
    timeline_weeks: Optional[int] = None
    budget_range: Optional[str] = None

    plan_metadata: Dict[str, Any]
    tech_stack: Dict[str, Any]
    database_schema: Dict[str, Any]
    risks: List[Dict[str, Any]]
    roadmap: Dict[str, Any]
    key_features: List[Dict[str, Any]]
    executive_summary: str

    expires_at: Optional[datetime] = None
    forked_from_id: Optional[str] = None


class ProjectRecord(BaseModel):
    """A durable project as read back from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    user_id: Optional[str] = None
    title: str
    description: str
    problem_statement: str
    is_public: bool = True
    target_users: Optional[int] = None
    team_size: Optional[int] = None
    timeline_weeks: Optional[int] = None
    budget_range: Optional[str] = None

    plan_metadata: Dict[str, Any]
    tech_stack: Dict[str, Any]
    database_schema: Dict[str, Any]
    risks: List[Dict[str, Any]]
    roadmap: Dict[str, Any]
    key_features: List[Dict[str, Any]]
    executive_summary: str

    view_count: int = Field(0, ge=0)
    fork_count: int = Field(0, ge=0)
    expires_at: Optional[datetime] = None
    forked_from_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def plan(self) -> PlanDocument:
        """Rebuild the typed plan from the stored sections."""
        return PlanDocument.model_validate({
            "metadata": self.plan_metadata,
            "techStack": self.tech_stack,
            "databaseSchema": self.database_schema,
            "risks": self.risks,
            "roadmap": self.roadmap,
            "keyFeatures": self.key_features,
            "executiveSummary": self.executive_summary,
        })

    def to_brief(self) -> ProjectBrief:
        """The brief this project was created from (used when forking).

        The stored timeline is the plan's adjusted one, which may fall outside
        the range a caller may request; it is dropped in that case since the
        plan supersedes it on persist anyway.
        """
        timeline = self.timeline_weeks
        if timeline is not None and not 1 <= timeline <= 520:
            timeline = None
        return ProjectBrief(
            title=self.title,
            description=self.description,
            problem_statement=self.problem_statement,
            target_users=self.target_users,
            team_size=self.team_size,
            timeline_weeks=timeline,
            budget_range=self.budget_range,
            is_public=self.is_public,
        )
