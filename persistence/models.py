import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (UniqueConstraint("slug", name="uq_projects_slug"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=True)  # NULL for guest projects
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    problem_statement = Column(Text, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)

    target_users = Column(Integer, nullable=True)
    team_size = Column(Integer, nullable=True)
    timeline_weeks = Column(Integer, nullable=True)
    budget_range = Column(String(50), nullable=True)

    # Plan sections, stored in their camelCase wire form
    plan_metadata = Column(JSON, nullable=False)
    tech_stack = Column(JSON, nullable=False)
    database_schema = Column(JSON, nullable=False)
    risks = Column(JSON, nullable=False)
    roadmap = Column(JSON, nullable=False)
    key_features = Column(JSON, nullable=False)
    executive_summary = Column(Text, nullable=False)

    view_count = Column(Integer, nullable=False, default=0)
    fork_count = Column(Integer, nullable=False, default=0)
    forked_from_id = Column(String(36), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


Index("idx_projects_user_id_created_at", Project.user_id, Project.created_at.desc())
Index("idx_projects_public_created_at", Project.is_public, Project.created_at.desc())
Index("idx_projects_expires_at", Project.expires_at)
