"""Builds chat prompts for the LLM scorer and mentor from Jinja2 templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from ..models import (
    EvaluationResult,
    PlagiarismAssessment,
    Project,
    RepositoryAnalysis,
    VerificationResult,
)
from ..plagiarism import plagiarism_level


@dataclass(frozen=True)
class PromptMessage:
    """Represents a single chat message for LLM prompting."""

    role: str
    content: str


@dataclass
class PromptRequest:
    """System and user messages for one LLM call."""

    purpose: str
    messages: List[PromptMessage]
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def system(self) -> Optional[str]:
        for message in self.messages:
            if message.role == "system":
                return message.content
        return None

    @property
    def user(self) -> str:
        return "\n\n".join(message.content for message in self.messages if message.role == "user")


class PromptBuilder:
    """Renders scoring and mentorship prompts grounded in the project data."""

    SCORING_SYSTEM_PROMPT = (
        "You are an expert hackathon judge. Score strictly from the data provided, "
        "never invent features, and answer with JSON only."
    )
    MENTORSHIP_SYSTEM_PROMPT = (
        "You are an expert hackathon mentor. Every recommendation must cite the real numbers "
        "in the data, fit the project's existing stack and domain, and be achievable in 2-6 "
        "hours. Address serious problems such as high plagiarism or a single committing author "
        "directly but respectfully. Answer with JSON only."
    )

    def __init__(self, templates_dir: Path | None = None) -> None:
        default_dir = Path(__file__).with_name("templates")
        directories = [str(templates_dir)] if templates_dir else []
        if str(default_dir) not in directories:
            directories.append(str(default_dir))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def build_scoring_prompt(
        self,
        project: Project,
        analysis: Optional[RepositoryAnalysis],
        plagiarism: PlagiarismAssessment,
        criteria: Sequence[object],
    ) -> PromptRequest:
        body = self._render(
            "scoring.j2",
            project=project,
            members=list(project.active_members),
            analysis=analysis,
            plagiarism=plagiarism,
            plagiarism_label=plagiarism_level(plagiarism.overall_score),
            criteria=list(criteria),
        )
        return PromptRequest(
            purpose="scoring",
            messages=[
                PromptMessage(role="system", content=self.SCORING_SYSTEM_PROMPT),
                PromptMessage(role="user", content=body),
            ],
            metadata={"project": project.project_name},
        )

    def build_mentorship_prompt(
        self,
        project: Project,
        verification: VerificationResult,
        *,
        analysis: Optional[RepositoryAnalysis] = None,
        evaluation: Optional[EvaluationResult] = None,
        plagiarism: Optional[PlagiarismAssessment] = None,
    ) -> PromptRequest:
        body = self._render(
            "mentorship.j2",
            project=project,
            members=list(project.active_members),
            analysis=analysis if analysis is not None else project.analysis,
            evaluation=evaluation if evaluation is not None else project.evaluation,
            plagiarism=plagiarism if plagiarism is not None else project.plagiarism,
            verification=verification,
        )
        return PromptRequest(
            purpose="mentorship",
            messages=[
                PromptMessage(role="system", content=self.MENTORSHIP_SYSTEM_PROMPT),
                PromptMessage(role="user", content=body),
            ],
            metadata={"project": project.project_name, "domain": project.domain},
        )

    def _render(self, template_name: str, **context: object) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context).strip() + "\n"


__all__ = ["PromptBuilder", "PromptMessage", "PromptRequest"]
