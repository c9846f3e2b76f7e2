"""Project Service - the read/write façade over generation and storage.

The service:
1. Creates projects (generate a plan, then persist it)
2. Serves reads through the visibility gate, counting views atomically
3. Forks readable projects under the forker's identity
4. Restricts updates and deletes to the owner
"""

from typing import List, Optional, Union

from agents.planner_agent import PlannerAgent
from contracts.brief_contracts import ProjectBrief, ProjectUpdate
from contracts.project_contracts import ProjectRecord
from logging_config import get_logger
from persistence.persister import ProjectPersister
from persistence.store import ProjectStore
from persistence.visibility import is_readable

logger = get_logger(__name__)


class ProjectNotFound(Exception):
    """No project with that slug/id, or the viewer may not read it."""

    def __init__(self, key: str):
        super().__init__(f"Project not found: {key}")
        self.key = key


class ProjectAccessDenied(Exception):
    """The caller does not own the project they tried to change."""

    def __init__(self, project_id: str):
        super().__init__(f"Only the owner may modify project {project_id}")
        self.project_id = project_id


class ProjectService:
    """Entry point for everything a caller does with projects.

    Args:
        planner: Generates plans from briefs
        persister: Stores new projects with unique slugs
        store: Reads and owner-scoped writes
    """

    def __init__(self, planner: PlannerAgent, persister: ProjectPersister, store: ProjectStore):
        self.planner = planner
        self.persister = persister
        self.store = store

    def create_project(self, brief: ProjectBrief, owner_id: Optional[str] = None) -> ProjectRecord:
        """Generate a plan for the brief and store it.

        Raises:
            GenerationFailure: Plan generation failed (nothing is stored)
            PersistFailure: The plan could not be stored
        """
        plan = self.planner.generate(brief)
        return self.persister.create(brief, plan, owner_id)

    def _readable(self, slug: str, viewer_id: Optional[str]) -> ProjectRecord:
        project = self.store.get_by_slug(slug)
        # Unreadable projects are reported exactly like missing ones
        if project is None or not is_readable(project, viewer_id):
            raise ProjectNotFound(slug)
        return project

    def view_project(self, slug: str, viewer_id: Optional[str] = None) -> ProjectRecord:
        """Read a project and count the view.

        Returns:
            The record after its view count was incremented

        Raises:
            ProjectNotFound: Missing, or private and not owned by the viewer
        """
        project = self._readable(slug, viewer_id)
        viewed = self.store.increment_view_count(project.id)
        if viewed is None:
            raise ProjectNotFound(slug)
        return viewed

    def fork_project(self, slug: str, viewer_id: Optional[str] = None) -> ProjectRecord:
        """Copy a readable project's brief and plan under the viewer's identity.

        Returns:
            The new project (fresh slug, ``forked_from_id`` set)
        """
        source = self._readable(slug, viewer_id)
        fork = self.persister.create(
            source.to_brief(),
            source.plan,
            owner_id=viewer_id,
            forked_from_id=source.id,
        )
        self.store.increment_fork_count(source.id)
        logger.info(f"Forked {source.slug!r} into {fork.slug!r}")
        return fork

    def update_project(
        self,
        project_id: str,
        owner_id: Optional[str],
        changes: Union[ProjectUpdate, dict],
    ) -> ProjectRecord:
        """Apply owner edits. The slug never changes.

        Raises:
            ProjectNotFound: No such project
            ProjectAccessDenied: The caller is not the owner
        """
        if isinstance(changes, dict):
            changes = ProjectUpdate.model_validate(changes)
        updated = self.store.update_owned(project_id, owner_id, changes.changes())
        if updated is None:
            raise self._write_refusal(project_id)
        return updated

    def delete_project(self, project_id: str, owner_id: Optional[str]) -> None:
        """Delete a project the caller owns."""
        if not self.store.delete_owned(project_id, owner_id):
            raise self._write_refusal(project_id)
        logger.info(f"Deleted project {project_id}")

    def _write_refusal(self, project_id: str) -> Exception:
        if self.store.get_by_id(project_id) is None:
            return ProjectNotFound(project_id)
        return ProjectAccessDenied(project_id)

    def list_public_projects(self, limit: int = 50, offset: int = 0) -> List[ProjectRecord]:
        return self.store.list_public(limit=limit, offset=offset)

    def list_owner_projects(self, owner_id: str, limit: int = 50, offset: int = 0) -> List[ProjectRecord]:
        return self.store.list_for_owner(owner_id, limit=limit, offset=offset)
