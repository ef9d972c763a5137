"""Verification gate and mentorship generation."""

from .advisor import MentorshipAdvisor
from .rules import domain_tech_suggestions, rule_based_mentorship
from .verification import verify_project_data

__all__ = [
    "MentorshipAdvisor",
    "domain_tech_suggestions",
    "rule_based_mentorship",
    "verify_project_data",
]
