"""Durable storage of projects: slugs, store, persister and read gate."""

from .models import Base, Project
from .persister import (
    PersistFailure,
    ProjectPersister,
    RetryPolicy,
    SlugExhausted,
    StorageFailure,
)
from .session import create_db_engine, create_session_factory, init_db
from .slugs import FALLBACK_BASE, MAX_SLUG_LENGTH, SlugAllocator, normalize_slug
from .store import ProjectStore, SlugConflictError, StoreError
from .visibility import is_readable

__all__ = [
    "Base",
    "Project",
    "PersistFailure",
    "ProjectPersister",
    "RetryPolicy",
    "SlugExhausted",
    "StorageFailure",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "FALLBACK_BASE",
    "MAX_SLUG_LENGTH",
    "SlugAllocator",
    "normalize_slug",
    "ProjectStore",
    "SlugConflictError",
    "StoreError",
    "is_readable",
]
