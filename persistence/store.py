"""SQLAlchemy-backed project store.

Every public method opens its own session, so one store instance can be
shared across threads. SQLAlchemy errors never leave this module: a slug
uniqueness violation becomes ``SlugConflictError`` and anything else
``StoreError``.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from contracts.project_contracts import ProjectDraft, ProjectRecord
from logging_config import get_logger
from .models import Project

logger = get_logger(__name__)

# Columns an owner may change after creation
UPDATABLE_FIELDS = frozenset({
    "title", "description", "problem_statement", "target_users",
    "team_size", "budget_range", "is_public",
})


class StoreError(Exception):
    """The store could not complete an operation."""


class SlugConflictError(StoreError):
    """Insert rejected because the slug is already taken."""


def _is_slug_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    if "slug" not in message:
        return False
    # sqlite: "UNIQUE constraint failed: projects.slug"; postgres: SQLSTATE 23505
    return (
        "unique" in message
        or "duplicate" in message
        or getattr(error.orig, "pgcode", None) == "23505"
    )


class ProjectStore:
    """Relational store for projects."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            if _is_slug_violation(e):
                raise SlugConflictError(str(e.orig)) from e
            raise StoreError(f"Integrity error: {e.orig}") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(str(e)) from e
        except (OverflowError, ValueError) as e:
            # driver refused to bind a value (e.g. int too large for the column)
            session.rollback()
            raise StoreError(f"Could not bind value: {e}") from e
        finally:
            session.close()

    # --- reads -----------------------------------------------------------

    def get_by_slug(self, slug: str) -> Optional[ProjectRecord]:
        with self._session() as session:
            obj = session.scalars(select(Project).where(Project.slug == slug)).first()
            return ProjectRecord.model_validate(obj) if obj else None

    def get_by_id(self, project_id: str) -> Optional[ProjectRecord]:
        with self._session() as session:
            obj = session.get(Project, project_id)
            return ProjectRecord.model_validate(obj) if obj else None

    def slug_exists(self, slug: str) -> bool:
        with self._session() as session:
            found = session.scalar(select(Project.id).where(Project.slug == slug).limit(1))
            return found is not None

    def list_public(self, limit: int = 50, offset: int = 0) -> List[ProjectRecord]:
        """Public projects, newest first."""
        with self._session() as session:
            rows = session.scalars(
                select(Project)
                .where(Project.is_public.is_(True))
                .order_by(Project.created_at.desc())
                .offset(offset)
                .limit(limit)
            ).all()
            return [ProjectRecord.model_validate(row) for row in rows]

    def list_for_owner(self, owner_id: str, limit: int = 50, offset: int = 0) -> List[ProjectRecord]:
        """All projects of one owner, public or not, newest first."""
        with self._session() as session:
            rows = session.scalars(
                select(Project)
                .where(Project.user_id == owner_id)
                .order_by(Project.created_at.desc())
                .offset(offset)
                .limit(limit)
            ).all()
            return [ProjectRecord.model_validate(row) for row in rows]

    # --- writes ----------------------------------------------------------

    def insert(self, slug: str, draft: ProjectDraft) -> ProjectRecord:
        """Insert a new project and return it as stored.

        Raises:
            SlugConflictError: The slug is already taken
            StoreError: Any other storage failure
        """
        with self._session() as session:
            obj = Project(slug=slug, view_count=0, fork_count=0, **draft.model_dump())
            session.add(obj)
            session.flush()
            session.refresh(obj)
            record = ProjectRecord.model_validate(obj)
        logger.debug(f"Inserted project {record.id} as {slug!r}")
        return record

    def _increment(self, project_id: str, column) -> Optional[ProjectRecord]:
        with self._session() as session:
            result = session.execute(
                update(Project)
                .where(Project.id == project_id)
                # counters are not edits: keep updated_at as is
                .values({column: column + 1, Project.updated_at: Project.updated_at})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            obj = session.get(Project, project_id, populate_existing=True)
            return ProjectRecord.model_validate(obj)

    def increment_view_count(self, project_id: str) -> Optional[ProjectRecord]:
        """Atomically add one view; returns the post-increment record."""
        return self._increment(project_id, Project.view_count)

    def increment_fork_count(self, project_id: str) -> Optional[ProjectRecord]:
        """Atomically add one fork; returns the post-increment record."""
        return self._increment(project_id, Project.fork_count)

    def update_owned(
        self, project_id: str, owner_id: Optional[str], changes: Dict[str, Any]
    ) -> Optional[ProjectRecord]:
        """Apply changes if, and only if, ``owner_id`` owns the project.

        Returns None when the project does not exist or is not owned by
        ``owner_id`` (guest projects have no owner and cannot be edited).
        """
        if owner_id is None:
            return None
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        with self._session() as session:
            owned = (Project.id == project_id) & (Project.user_id == owner_id)
            if changes:
                result = session.execute(
                    update(Project).where(owned).values(**changes)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    return None
            obj = session.scalars(select(Project).where(owned)).first()
            return ProjectRecord.model_validate(obj) if obj else None

    def delete_owned(self, project_id: str, owner_id: Optional[str]) -> bool:
        """Delete if owned by ``owner_id``; returns whether a row was removed."""
        if owner_id is None:
            return False
        with self._session() as session:
            result = session.execute(
                delete(Project)
                .where(Project.id == project_id, Project.user_id == owner_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0
