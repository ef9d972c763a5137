"""Mentorship generation: verification gate, LLM mentor and rule-based fallback."""

from __future__ import annotations

from typing import List, Mapping, Optional

from ..llm.runner import LLMError, LLMRunner, extract_json_object
from ..logging import get_logger
from ..models import MentorshipAdvice, MentorshipResult, Project, VerificationResult
from ..prompting.builder import PromptBuilder
from ..utils import utc_now_iso
from .rules import rule_based_mentorship
from .verification import FAIL, verify_project_data

BLOCKING_FAILS = 2
BLOCKED_ACTION = "Fix the verification issues above before requesting AI mentorship."
BLOCKED_ADVICE = (
    "Project needs more data before meaningful mentorship can be provided. "
    "Ensure scoring is done and a description is provided."
)
_PRIORITIES = ("critical", "high", "medium", "low")
_EFFORTS = ("quick-fix", "moderate", "significant")


class MentorshipAdvisor:
    """Produce mentorship for a project, preferring the LLM when one is configured."""

    def __init__(
        self,
        runner: Optional[LLMRunner] = None,
        builder: Optional[PromptBuilder] = None,
    ) -> None:
        self.runner = runner
        self.builder = builder or PromptBuilder()
        self.logger = get_logger("mentorship")

    @property
    def llm_enabled(self) -> bool:
        return self.runner is not None and self.runner.configured

    def advise(self, project: Project) -> MentorshipResult:
        verification = verify_project_data(project)
        timestamp = utc_now_iso()

        fails = sum(1 for check in verification.checks if check.status == FAIL)
        if fails >= BLOCKING_FAILS:
            self.logger.info(
                "Mentorship blocked for %r: %d verification checks failed",
                project.project_name,
                fails,
            )
            return MentorshipResult(
                verification=verification,
                improvements=(),
                action_plan=(BLOCKED_ACTION,),
                tech_suggestions=(),
                overall_advice=BLOCKED_ADVICE,
                timestamp=timestamp,
                source="verification",
            )

        if self.llm_enabled:
            try:
                return self._llm_mentorship(project, verification, timestamp)
            except Exception as exc:
                self.logger.warning(
                    "LLM mentorship failed for %r, using rule-based mentor: %s",
                    project.project_name,
                    exc,
                )
        return rule_based_mentorship(project, verification, timestamp)

    def _llm_mentorship(
        self, project: Project, verification: VerificationResult, timestamp: str
    ) -> MentorshipResult:
        assert self.runner is not None
        request = self.builder.build_mentorship_prompt(project, verification)
        reply = self.runner.run(request.user, system=request.system, json_mode=True)
        parsed = extract_json_object(reply)

        improvements = parsed.get("improvements")
        if not isinstance(improvements, list):
            raise LLMError("Mentorship reply is missing the improvements list")
        return MentorshipResult(
            verification=verification,
            improvements=tuple(
                _parse_advice(item) for item in improvements if isinstance(item, Mapping)
            ),
            action_plan=tuple(_string_list(parsed.get("action_plan"))),
            tech_suggestions=tuple(_string_list(parsed.get("tech_suggestions"))),
            overall_advice=str(parsed.get("overall_advice") or ""),
            timestamp=timestamp,
            source="llm",
        )


def _parse_advice(item: Mapping[str, object]) -> MentorshipAdvice:
    priority = str(item.get("priority") or "medium").lower()
    effort = str(item.get("effort") or "moderate").lower()
    return MentorshipAdvice(
        area=str(item.get("area") or ""),
        current_state=str(item.get("current_state") or item.get("currentState") or ""),
        recommendation=str(item.get("recommendation") or ""),
        priority=priority if priority in _PRIORITIES else "medium",
        effort=effort if effort in _EFFORTS else "moderate",
    )


def _string_list(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


__all__ = ["MentorshipAdvisor"]
