"""Agents that call the language model.

Each agent owns one kind of model call and its failure handling.
"""

from .base_agent import AgentResult, BaseAgent, TokenUsage
from .failures import (
    AuthFailed,
    ConfigMissing,
    GenerationFailure,
    InsufficientQuota,
    InvalidResponse,
    RateLimited,
    UnknownFailure,
    classify_transport_error,
)
from .planner_agent import GenerationStage, PlannerAgent
from .prompts import NOT_SPECIFIED, SYSTEM_PROMPT, PlanRequest, build_plan_request

__all__ = [
    # Base
    "AgentResult",
    "BaseAgent",
    "TokenUsage",
    # Failures
    "AuthFailed",
    "ConfigMissing",
    "GenerationFailure",
    "InsufficientQuota",
    "InvalidResponse",
    "RateLimited",
    "UnknownFailure",
    "classify_transport_error",
    # Planner
    "GenerationStage",
    "PlannerAgent",
    "NOT_SPECIFIED",
    "SYSTEM_PROMPT",
    "PlanRequest",
    "build_plan_request",
]
