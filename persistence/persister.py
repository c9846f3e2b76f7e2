"""Create durable project records from a brief and a validated plan.

Slug allocation is optimistic, so concurrent creations with the same title
can collide at insert time. Collisions are retried a bounded number of times
with a growing delay; any other storage error is fatal.
"""

import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from config import Settings, settings
from contracts.brief_contracts import ProjectBrief
from contracts.plan_contracts import PlanDocument
from contracts.project_contracts import ProjectDraft, ProjectRecord
from logging_config import get_logger
from .slugs import SlugAllocator
from .store import SlugConflictError, StoreError

logger = get_logger(__name__)


class PersistFailure(Exception):
    """Base class for failures to store a new project."""
    kind = "persist_failure"


class StorageFailure(PersistFailure):
    """The store failed for a reason other than a slug collision. Not retried."""
    kind = "storage"


class SlugExhausted(PersistFailure):
    """Every attempt lost the race for a slug; try a different title."""
    kind = "slug_exhausted"

    def __init__(self, title: str, attempts: int):
        super().__init__(
            f"Could not allocate a unique slug for {title!r} after {attempts} attempts; "
            "try a different title"
        )
        self.title = title
        self.attempts = attempts


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry for slug collisions. Attempt N waits ``base_delay * N``."""
    max_attempts: int = 3
    base_delay: float = 0.05
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * attempt

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "RetryPolicy":
        source = source or settings
        return cls(
            max_attempts=source.slug_max_attempts,
            base_delay=source.slug_retry_base_delay_seconds,
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Largest value the 32-bit timeline_weeks column holds
MAX_TIMELINE_WEEKS = 2**31 - 1


def _timeline_column(weeks: float) -> Optional[int]:
    """Whole weeks for the integer column, or None when it does not fit."""
    rounded = math.ceil(weeks)
    return rounded if rounded <= MAX_TIMELINE_WEEKS else None


class ProjectPersister:
    """Turns (brief, plan, owner) into a stored project with a unique slug.

    Args:
        store: ProjectStore (or anything with ``slug_exists`` and ``insert``)
        retry_policy: Collision retry policy; defaults from settings
        guest_ttl_hours: Lifetime of projects without an owner; defaults from settings
        clock: Returns "now" as an aware datetime
    """

    def __init__(
        self,
        store,
        retry_policy: Optional[RetryPolicy] = None,
        guest_ttl_hours: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.guest_ttl_hours = guest_ttl_hours if guest_ttl_hours is not None else settings.guest_project_ttl_hours
        self._clock = clock

    def build_draft(
        self,
        brief: ProjectBrief,
        plan: PlanDocument,
        owner_id: Optional[str],
        forked_from_id: Optional[str] = None,
    ) -> ProjectDraft:
        """Column values for the new record.

        The plan's adjusted timeline replaces the requested one, rounded up to
        whole weeks; it is left empty when too large for the column. Guest
        projects get an expiry; owned ones never expire.
        """
        wire = plan.to_wire()
        expires_at = None
        if owner_id is None:
            expires_at = self._clock() + timedelta(hours=self.guest_ttl_hours)

        return ProjectDraft(
            user_id=owner_id,
            title=brief.title,
            description=brief.description,
            problem_statement=brief.problem_statement,
            is_public=brief.is_public,
            target_users=brief.target_users,
            team_size=brief.team_size,
            timeline_weeks=_timeline_column(plan.roadmap.adjusted_timeline_weeks),
            budget_range=brief.budget_range,
            plan_metadata=wire["metadata"],
            tech_stack=wire["techStack"],
            database_schema=wire["databaseSchema"],
            risks=wire["risks"],
            roadmap=wire["roadmap"],
            key_features=wire["keyFeatures"],
            executive_summary=wire["executiveSummary"],
            expires_at=expires_at,
            forked_from_id=forked_from_id,
        )

    def create(
        self,
        brief: ProjectBrief,
        plan: PlanDocument,
        owner_id: Optional[str] = None,
        forked_from_id: Optional[str] = None,
    ) -> ProjectRecord:
        """Store a new project.

        Returns:
            The stored record, counters at zero

        Raises:
            StorageFailure: The store failed for any reason but a slug collision
            SlugExhausted: Every attempt collided on the slug
        """
        draft = self.build_draft(brief, plan, owner_id, forked_from_id)
        allocator = SlugAllocator(self._store)
        policy = self.retry_policy

        for attempt in range(1, policy.max_attempts + 1):
            try:
                slug = allocator.allocate(brief.title)
                record = self._store.insert(slug, draft)
            except SlugConflictError:
                logger.info(
                    f"Slug {slug!r} was taken before insert "
                    f"(attempt {attempt}/{policy.max_attempts})"
                )
                if attempt < policy.max_attempts:
                    policy.sleep(policy.delay_for(attempt))
                continue
            except StoreError as e:
                logger.error(f"Failed to store project {brief.title!r}: {e}")
                raise StorageFailure(str(e)) from e

            logger.info(f"Stored project {record.id} as {record.slug!r}")
            return record

        raise SlugExhausted(brief.title, policy.max_attempts)
