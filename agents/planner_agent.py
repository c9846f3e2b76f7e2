"""Planner Agent - turns a project brief into a validated plan document.

One model call per run, no retries at this layer. The outcome is either a
PlanDocument or exactly one GenerationFailure.
"""

from enum import Enum
from typing import Optional

from agents.base_agent import AgentResult, BaseAgent, TokenUsage
from agents.failures import GenerationFailure, InvalidResponse
from agents.prompts import build_plan_request
from config import GenerationConfig
from contracts.brief_contracts import ProjectBrief
from contracts.plan_contracts import PlanDocument
from logging_config import get_logger
from providers import LLMProvider
from validation.response_parser import ParseFailure, parse_plan_response

logger = get_logger(__name__)


class GenerationStage(str, Enum):
    IDLE = "idle"
    REQUEST_SENT = "request_sent"
    PARSED_OK = "parsed_ok"
    TRANSPORT_FAILED = "transport_failed"
    RESPONSE_INVALID = "response_invalid"


class PlannerAgent(BaseAgent):
    """Generates a pre-development plan for a project brief.

    The agent:
    1. Refuses to run without a model and credential
    2. Sends the fixed planning prompt plus the rendered brief
    3. Parses and validates the answer against the plan contract
    """

    def __init__(self, config: GenerationConfig, provider: Optional[LLMProvider] = None):
        super().__init__(role="planner", config=config, provider=provider)
        self.stage = GenerationStage.IDLE

    def get_task_description(self) -> str:
        return "Generate a pre-development plan (stack, schema, risks, roadmap, features) from a project brief"

    def run(self, brief: ProjectBrief) -> AgentResult:
        """Generate a plan and report the call's usage.

        Args:
            brief: Validated project brief

        Returns:
            AgentResult whose output is the PlanDocument

        Raises:
            ConfigMissing: Model or credential not configured (provider not called)
            AuthFailed, RateLimited, InsufficientQuota, UnknownFailure: Transport failed
            InvalidResponse: The model's answer is not a valid plan
        """
        self.stage = GenerationStage.IDLE
        self._check_config()

        request = build_plan_request(brief)
        self.stage = GenerationStage.REQUEST_SENT
        logger.info("Requesting plan for %r from %s", brief.title, self.config.model)
        try:
            response = self._complete(request.system_prompt, request.user_prompt)
        except GenerationFailure:
            self.stage = GenerationStage.TRANSPORT_FAILED
            raise

        try:
            plan = parse_plan_response(response.content)
        except ParseFailure as e:
            self.stage = GenerationStage.RESPONSE_INVALID
            logger.warning("Plan for %r rejected: %s", brief.title, e)
            logger.debug("First 500 chars of rejected response: %s", response.content[:500])
            raise InvalidResponse(e) from e

        self.stage = GenerationStage.PARSED_OK
        return AgentResult(
            output=plan,
            token_usage=TokenUsage(
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                cost=response.cost,
            ),
            model=response.model,
            provider=response.provider,
            raw_response=response.content,
        )

    def generate(self, brief: ProjectBrief) -> PlanDocument:
        """Generate a validated plan for a brief.

        Convenience wrapper around run() that returns just the plan.
        """
        return self.run(brief).output
