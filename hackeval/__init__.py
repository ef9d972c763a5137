"""Automated evaluation of hackathon project submissions."""

from .models import (
    EvaluationResult,
    InvalidProjectError,
    MentorshipResult,
    PlagiarismAssessment,
    Project,
    RepositoryAnalysis,
    VerificationResult,
)
from .pipeline import (
    EvaluationPipeline,
    analyze_repository,
    assess_plagiarism,
    evaluate_project,
    generate_mentorship,
    generate_questions,
    verify_project_data,
)

__version__ = "0.1.0"

__all__ = [
    "EvaluationPipeline",
    "EvaluationResult",
    "InvalidProjectError",
    "MentorshipResult",
    "PlagiarismAssessment",
    "Project",
    "RepositoryAnalysis",
    "VerificationResult",
    "__version__",
    "analyze_repository",
    "assess_plagiarism",
    "evaluate_project",
    "generate_mentorship",
    "generate_questions",
    "verify_project_data",
]
