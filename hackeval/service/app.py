"""FastAPI application exposing the evaluation pipeline over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..models import InvalidProjectError, Project
from ..pipeline import EvaluationPipeline, default_pipeline
from ..questions import generate_score_followups

T = TypeVar("T")


class PresentationPayload(BaseModel):
    file_name: str
    file_type: str = ""
    size_bytes: int = 0


class ProjectPayload(BaseModel):
    project_name: str
    domain: str = "Other"
    description: Optional[str] = ""
    github_url: Optional[str] = ""
    team_name: Optional[str] = ""
    members: List[str] = Field(default_factory=list)
    presentation: Optional[PresentationPayload] = None
    id: str = ""
    submitted_by: str = ""
    submission_time: str = ""
    analysis: Optional[Dict[str, Any]] = None
    plagiarism: Optional[Dict[str, Any]] = None
    evaluation: Optional[Dict[str, Any]] = None

    def to_project(self) -> Project:
        return Project.from_dict(self.model_dump())


class AnalyzeRequest(BaseModel):
    github_url: str


class QuestionsResponse(BaseModel):
    questions: List[str]
    followups: List[str]


class HealthResponse(BaseModel):
    status: str


async def _run_blocking(func: Callable[[], T]) -> T:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def create_app(
    pipeline_factory: Callable[[], EvaluationPipeline] = default_pipeline,
    *,
    allowed_origins: Optional[Sequence[str]] = None,
) -> FastAPI:
    """Create the FastAPI application exposing hackeval operations."""

    app = FastAPI(title="HackEval Service", version="0.1.0")
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(allowed_origins),
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    async def get_pipeline() -> EvaluationPipeline:
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze")
    async def analyze(
        payload: AnalyzeRequest,
        pipeline: EvaluationPipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        analysis = await _run_blocking(lambda: pipeline.analyze_repository(payload.github_url))
        return analysis.to_dict()

    @app.post("/plagiarism")
    async def plagiarism(
        payload: ProjectPayload,
        pipeline: EvaluationPipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        project = payload.to_project()
        assessment = await _run_blocking(lambda: pipeline.assess_plagiarism(project))
        return assessment.to_dict()

    @app.post("/evaluate")
    async def evaluate(
        payload: ProjectPayload,
        pipeline: EvaluationPipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        project = payload.to_project()
        evaluated = await _run_blocking(lambda: pipeline.run(project))
        return evaluated.to_dict()

    @app.post("/questions", response_model=QuestionsResponse)
    async def questions(
        payload: ProjectPayload,
        pipeline: EvaluationPipeline = Depends(get_pipeline),
    ) -> QuestionsResponse:
        project = payload.to_project()
        scores = project.evaluation.scores if project.evaluation is not None else {}
        return QuestionsResponse(
            questions=pipeline.generate_questions(project),
            followups=generate_score_followups(project, scores),
        )

    @app.post("/verify")
    async def verify(
        payload: ProjectPayload,
        pipeline: EvaluationPipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        return pipeline.verify_project_data(payload.to_project()).to_dict()

    @app.post("/mentorship")
    async def mentorship(
        payload: ProjectPayload,
        pipeline: EvaluationPipeline = Depends(get_pipeline),
    ) -> Dict[str, Any]:
        project = payload.to_project()
        result = await _run_blocking(lambda: pipeline.generate_mentorship(project))
        return result.to_dict()

    @app.exception_handler(InvalidProjectError)
    async def invalid_project_handler(_: Any, exc: InvalidProjectError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0",
    port: int = 8000,
    *,
    pipeline: Optional[EvaluationPipeline] = None,
) -> None:  # pragma: no cover - integration path
    shared = pipeline or default_pipeline()
    app = create_app(
        lambda: shared,
        allowed_origins=shared.config.service.allowed_origins,
    )
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
