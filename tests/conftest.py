"""Shared fixtures: a valid plan payload, briefs, an in-memory store, fake providers."""

import copy
import json
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

import pytest

from config import GenerationConfig
from contracts import PlanDocument, ProjectBrief, ProjectDraft, ProjectRecord
from persistence import ProjectStore, SlugConflictError, create_db_engine, create_session_factory, init_db
from providers.base import LLMProvider, LLMResponse


VALID_PLAN = {
    "metadata": {
        "confidenceScore": 72,
        "analysisDepth": "detailed",
        "generatedAt": "2024-05-01T12:00:00Z",
        "adjustmentsMade": ["Extended timeline from 4 to 10 weeks because payments need compliance work"],
    },
    "techStack": {
        "frontend": ["Next.js", "Tailwind CSS"],
        "backend": ["FastAPI"],
        "database": ["PostgreSQL"],
        "devops": ["Docker", "GitHub Actions"],
        "rationale": "A small team on a low budget benefits from managed hosting and one language per tier.",
    },
    "databaseSchema": {
        "tables": [
            {
                "name": "users",
                "columns": [
                    {"name": "id", "type": "uuid", "nullable": False, "primaryKey": True},
                    {"name": "email", "type": "varchar", "nullable": False},
                ],
            },
            {
                "name": "tasks",
                "columns": [
                    {"name": "id", "type": "uuid", "nullable": False, "primaryKey": True},
                    {
                        "name": "user_id",
                        "type": "uuid",
                        "nullable": False,
                        "foreignKey": {"table": "users", "column": "id"},
                    },
                ],
            },
        ],
        "relationships": [
            {"from": "users", "to": "tasks", "type": "one-to-many"},
        ],
    },
    "risks": [
        {
            "title": "Scope creep",
            "description": "Feature requests outpace a two-person team.",
            "severity": "High",
            "mitigation": "Freeze P0 scope until the beta ships.",
            "category": "Timeline",
        },
    ],
    "roadmap": {
        "adjustedTimelineWeeks": 9.5,
        "phases": [
            {
                "name": "Foundation & Setup",
                "duration": "3 weeks",
                "tasks": ["Set up repository and CI"],
                "deliverables": ["Deployed skeleton app"],
                "skillsRequired": ["Python"],
            },
        ],
    },
    "keyFeatures": [
        {
            "feature": "Task board",
            "description": "Drag-and-drop board of tasks.",
            "priority": "P0",
            "complexity": "Medium",
            "estimatedDays": 6,
        },
    ],
    "executiveSummary": "Viable as a focused MVP if payments are deferred to the second phase.",
}


@pytest.fixture
def plan_payload() -> dict:
    """A fresh, mutable copy of a plan that satisfies every contract rule."""
    return copy.deepcopy(VALID_PLAN)


@pytest.fixture
def plan_json(plan_payload) -> str:
    return json.dumps(plan_payload)


@pytest.fixture
def plan(plan_payload) -> PlanDocument:
    return PlanDocument.model_validate(plan_payload)


@pytest.fixture
def brief() -> ProjectBrief:
    return ProjectBrief(
        title="AI Tool!",
        description="A tool that summarizes meeting notes.",
        problem_statement="Teams lose decisions buried in long meeting notes.",
        team_size=2,
        timeline_weeks=4,
        budget_range="0-5k",
    )


@pytest.fixture
def generation_config() -> GenerationConfig:
    return GenerationConfig(model="openrouter/deepseek/deepseek-chat", api_key="sk-test")


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory) -> ProjectStore:
    return ProjectStore(session_factory)


class FakeProvider(LLMProvider):
    """Provider that returns canned text or raises a canned error."""

    def __init__(self, content: str = "", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def default_model(self) -> str:
        return "fake-model"

    def complete(self, system_prompt, user_message, model=None, max_tokens=None) -> LLMResponse:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_message": user_message,
            "model": model,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.content,
            input_tokens=120,
            output_tokens=480,
            model=model or self.default_model,
            provider=self.name,
            cost=0.002,
        )


@pytest.fixture
def fake_provider_factory():
    return FakeProvider


class InMemoryStore:
    """Thread-safe stand-in for ProjectStore with an atomic unique-slug insert.

    ``slug_exists`` and ``insert`` take the lock separately, which reproduces
    the probe/insert race of a real database.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.rows: Dict[str, ProjectRecord] = {}
        self.conflicts = 0

    def slug_exists(self, slug: str) -> bool:
        with self._lock:
            return any(row.slug == slug for row in self.rows.values())

    def insert(self, slug: str, draft: ProjectDraft) -> ProjectRecord:
        with self._lock:
            if any(row.slug == slug for row in self.rows.values()):
                self.conflicts += 1
                raise SlugConflictError(f"UNIQUE constraint failed: projects.slug ({slug})")
            now = datetime.now(timezone.utc)
            record = ProjectRecord(
                id=str(uuid.uuid4()),
                slug=slug,
                created_at=now,
                updated_at=now,
                **draft.model_dump(),
            )
            self.rows[record.id] = record
            return record


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()
