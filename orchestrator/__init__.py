"""Orchestration of plan generation and project storage."""

from .project_service import ProjectAccessDenied, ProjectNotFound, ProjectService

__all__ = [
    "ProjectAccessDenied",
    "ProjectNotFound",
    "ProjectService",
]
