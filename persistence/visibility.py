from typing import Optional

from contracts.project_contracts import ProjectRecord


def is_readable(project: ProjectRecord, viewer_id: Optional[str]) -> bool:
    """Public projects are readable by anyone; private ones only by their owner."""
    if project.is_public:
        return True
    return viewer_id is not None and viewer_id == project.user_id
