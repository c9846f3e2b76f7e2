"""Pydantic contracts for Plan Forge.

Briefs come in, plan documents come back from the model, project records
come out of the store. Every handoff is typed through these contracts.
"""

from .brief_contracts import ProjectBrief, ProjectUpdate

from .plan_contracts import (
    AnalysisDepth,
    RelationType,
    RiskSeverity,
    RiskCategory,
    FeaturePriority,
    Complexity,
    PlanMetadata,
    TechStack,
    ForeignKeyRef,
    DatabaseColumn,
    DatabaseTable,
    DatabaseRelationship,
    DatabaseSchema,
    Risk,
    RoadmapPhase,
    Roadmap,
    KeyFeature,
    PlanDocument,
)

from .project_contracts import ProjectDraft, ProjectRecord

__all__ = [
    # Brief
    "ProjectBrief",
    "ProjectUpdate",
    # Plan
    "AnalysisDepth",
    "RelationType",
    "RiskSeverity",
    "RiskCategory",
    "FeaturePriority",
    "Complexity",
    "PlanMetadata",
    "TechStack",
    "ForeignKeyRef",
    "DatabaseColumn",
    "DatabaseTable",
    "DatabaseRelationship",
    "DatabaseSchema",
    "Risk",
    "RoadmapPhase",
    "Roadmap",
    "KeyFeature",
    "PlanDocument",
    # Project
    "ProjectDraft",
    "ProjectRecord",
]
