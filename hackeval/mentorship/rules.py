"""Rule-based mentor used when no LLM is configured or the LLM call fails."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence, Tuple

from ..models import (
    EvaluationResult,
    MentorshipAdvice,
    MentorshipResult,
    Project,
    RepositoryAnalysis,
    VerificationResult,
)
from ..utils import dedupe

MAX_TECH_SUGGESTIONS = 5
WEAK_SCORE = 5
HIGH_PLAGIARISM = 50

_JS_LANGUAGE = re.compile(r"javascript|typescript", re.IGNORECASE)
_PYTHON_LANGUAGE = re.compile(r"python", re.IGNORECASE)


def _score_improvements(project: Project, evaluation: EvaluationResult) -> List[MentorshipAdvice]:
    scores = evaluation.scores
    advice: List[MentorshipAdvice] = []
    if scores.get("innovation", 10) <= WEAK_SCORE:
        advice.append(
            MentorshipAdvice(
                area="Innovation",
                current_state=(
                    f"Innovation scored {scores['innovation']}/10. "
                    f"{evaluation.explanations.get('innovation', '')}"
                ).strip(),
                recommendation=(
                    "Add a unique differentiator: what does your project do that no other does? "
                    "Consider integrating an emerging technology like AI/ML, blockchain or IoT to "
                    "stand out."
                ),
                priority="high",
                effort="moderate",
            )
        )
    if scores.get("technical_feasibility", 10) <= WEAK_SCORE:
        advice.append(
            MentorshipAdvice(
                area="Technical Depth",
                current_state=f"Technical feasibility scored {scores['technical_feasibility']}/10.",
                recommendation=(
                    "Add proper error handling, API integration, or a more sophisticated "
                    "architecture. Consider separating frontend and backend if not already done."
                ),
                priority="high",
                effort="moderate",
            )
        )
    if scores.get("mvp_completeness", 10) <= WEAK_SCORE:
        advice.append(
            MentorshipAdvice(
                area="MVP Completeness",
                current_state=(
                    f"MVP scored {scores['mvp_completeness']}/10, key features may be missing."
                ),
                recommendation=(
                    "Focus on completing 2-3 core features end-to-end rather than having many "
                    "half-done features. A working demo beats a feature list."
                ),
                priority="critical",
                effort="significant",
            )
        )
    if scores.get("presentation", 10) <= WEAK_SCORE:
        if project.presentation is not None:
            state = "Presentation uploaded but presentation score is low."
            recommendation = (
                "Improve your slides: add a problem statement, architecture diagram, demo "
                "screenshots, and a clear impact slide."
            )
        else:
            state = "No presentation uploaded."
            recommendation = (
                "Upload a presentation! Include problem, solution, demo, tech stack, impact "
                "and team slides."
            )
        advice.append(
            MentorshipAdvice(
                area="Presentation",
                current_state=state,
                recommendation=recommendation,
                priority="high",
                effort="quick-fix",
            )
        )
    return advice


def _repository_improvements(
    project: Project, analysis: RepositoryAnalysis
) -> Tuple[List[MentorshipAdvice], List[str], List[str]]:
    advice: List[MentorshipAdvice] = []
    actions: List[str] = []
    tech: List[str] = []
    if not analysis.has_tests:
        advice.append(
            MentorshipAdvice(
                area="Testing",
                current_state=f"{analysis.total_files} files but no test files detected.",
                recommendation=(
                    "Add at least 3-5 basic unit tests for core functions. Even simple tests "
                    "show engineering maturity to judges."
                ),
                priority="medium",
                effort="quick-fix",
            )
        )
        actions.append("Add a tests/ folder with basic unit tests for your core logic")
    if not analysis.has_readme or analysis.cleanliness_score < 5:
        advice.append(
            MentorshipAdvice(
                area="Documentation",
                current_state=(
                    "No README file found."
                    if not analysis.has_readme
                    else f"Code cleanliness: {analysis.cleanliness_score}/10."
                ),
                recommendation=(
                    "Add a comprehensive README with project description, setup instructions, "
                    "screenshots, tech stack and team info."
                ),
                priority="medium",
                effort="quick-fix",
            )
        )
        actions.append(
            "Write a README.md with setup instructions, screenshots, and architecture overview"
        )
    if not analysis.has_ci_config:
        tech.append("GitHub Actions: add a simple CI pipeline for automated testing and linting")
    if not analysis.has_container_file:
        tech.append("Docker: containerize your app for easy deployment and reproducibility")
    member_count = len(project.active_members)
    if analysis.single_author_percent == 100 and member_count >= 2:
        advice.append(
            MentorshipAdvice(
                area="Team Collaboration",
                current_state=f"Only 1 commit author despite {member_count} team members.",
                recommendation=(
                    "Have all team members make commits from their own accounts. Judges look "
                    "for distributed contributions."
                ),
                priority="high",
                effort="quick-fix",
            )
        )
    return advice, actions, tech


def _plagiarism_improvement(project: Project) -> List[MentorshipAdvice]:
    if project.plagiarism_score <= HIGH_PLAGIARISM:
        return []
    flags = "; ".join(project.plagiarism.flags) if project.plagiarism is not None else ""
    return [
        MentorshipAdvice(
            area="Code Originality",
            current_state=f"Plagiarism score: {project.plagiarism_score}%. {flags}".strip(),
            recommendation=(
                "Significantly customize any boilerplate or template code. Add unique business "
                "logic, custom UI, and original features that clearly differentiate your work."
            ),
            priority="critical",
            effort="significant",
        )
    ]


def domain_tech_suggestions(domain: str, languages: Sequence[str]) -> List[str]:
    """Tooling suggestions for ``domain`` that fit the detected languages."""
    is_js = any(_JS_LANGUAGE.search(language) for language in languages)
    is_python = any(_PYTHON_LANGUAGE.search(language) for language in languages)

    table: Dict[str, List[str]] = {
        "AI/ML": [
            "Hugging Face Transformers: add a pre-trained model to your Python pipeline"
            if is_python
            else "TensorFlow.js: run ML models in the browser with your JS stack",
            "Streamlit: build a quick demo UI for your ML model"
            if is_python
            else "Gradio: create an interactive ML demo alongside your app",
        ],
        "HealthTech": [
            "FHIR API: add health data interoperability to your HealthTech app",
            "Chart.js: visualize patient and health metrics in your JS app"
            if is_js
            else "Plotly: create interactive health data dashboards",
        ],
        "FinTech": [
            "Stripe.js: integrate payment processing directly in your frontend"
            if is_js
            else "Razorpay Python SDK: add payment support to your backend",
            "Recharts: build financial dashboards in React"
            if is_js
            else "Chart.js: create financial data visualizations",
        ],
        "Blockchain": [
            "Hardhat: test your smart contracts locally",
            "ethers.js: connect your frontend to Web3",
        ],
        "IoT": [
            "paho-mqtt: connect IoT devices with MQTT in Python"
            if is_python
            else "MQTT.js: add IoT message handling to your app",
            "Grafana: create real-time sensor dashboards",
        ],
        "EdTech": [
            "Socket.io: add real-time collaboration to your EdTech platform"
            if is_js
            else "WebSockets: enable live learning sessions",
            "Mermaid.js: add interactive diagrams for educational content",
        ],
        "Cybersecurity": [
            "OWASP ZAP: scan your app for security vulnerabilities",
            "Helmet.js: add HTTP security headers to your Node.js server"
            if is_js
            else "PyJWT: secure your Python API with token-based auth",
        ],
        "SmartCities": [
            "Leaflet.js: add interactive maps to your SmartCities dashboard",
            "D3.js: create data visualizations for urban data",
        ],
        "AgriTech": [
            "OpenWeather API: integrate real weather data for your AgriTech features",
            "TensorFlow Lite: deploy crop detection models on edge devices"
            if is_python
            else "TensorFlow.js: run agricultural ML models in the browser",
        ],
        "Sustainability": [
            "Carbon Interface API: add carbon footprint tracking to your sustainability app",
            "Recharts: visualize environmental impact data"
            if is_js
            else "Matplotlib: generate impact reports",
        ],
        "Gaming": [
            "Phaser.js: build 2D game mechanics in the browser"
            if is_js
            else "Pygame: create game logic in Python",
            "Socket.io: add multiplayer support",
        ],
        "SocialImpact": [
            "Mapbox: add geographic visualization to show social impact",
            "SendGrid: add notification emails for community engagement",
        ],
    }
    default = [
        "Vercel: deploy your JS app instantly for demo"
        if is_js
        else "Railway.app: deploy your backend instantly for demo",
        "Sentry: add error monitoring to catch issues during judging",
    ]
    return table.get(domain, default)


def _ranked_scores(evaluation: EvaluationResult) -> List[Tuple[str, int]]:
    return sorted(evaluation.scores.items(), key=lambda item: item[1])


def _humanize(key: str) -> str:
    return key.replace("_", " ")


def _overall_advice(
    project: Project, evaluation: EvaluationResult | None, languages: Sequence[str]
) -> str:
    name = f'"{project.project_name}" ({project.domain})'
    if evaluation is None:
        return (
            f"{name} hasn't been scored yet. Run scoring first for detailed, "
            "data-driven mentorship."
        )
    ranked = _ranked_scores(evaluation)
    weakest, weakest_value = ranked[0] if ranked else ("overall_quality", 0)
    strongest = ranked[-1][0] if ranked else "presentation"
    stack = ", ".join(languages) if languages else "your tech stack"
    total = f"{evaluation.weighted_total:.1f}/10"
    if evaluation.weighted_total >= 7:
        return (
            f"{name} scored {total}, strong work! Your {_humanize(strongest)} stands out. "
            f"Focus the remaining time on polishing {_humanize(weakest)} ({weakest_value}/10) "
            f"and rehearsing your demo with your {stack} implementation."
        )
    if evaluation.weighted_total >= 5:
        return (
            f"{name} scored {total}, a solid foundation built with {stack}. Your "
            f"{_humanize(weakest)} ({weakest_value}/10) is the biggest opportunity; improving "
            "it could push your total score significantly."
        )
    return (
        f"{name} scored {total} and needs focused effort. Prioritize getting your core "
        f"{project.domain} feature working end-to-end in {stack} before adding anything new. "
        f"Your {_humanize(weakest)} ({weakest_value}/10) needs the most attention."
    )


def rule_based_mentorship(
    project: Project, verification: VerificationResult, timestamp: str
) -> MentorshipResult:
    """Derive improvements, an action plan and tech suggestions from stored results."""
    evaluation = project.evaluation
    analysis = project.analysis if project.analysis is not None and project.analysis.fetched else None
    languages = list(analysis.languages) if analysis is not None else []

    improvements: List[MentorshipAdvice] = []
    action_plan: List[str] = []
    tech_suggestions: List[str] = []

    if evaluation is not None:
        improvements.extend(_score_improvements(project, evaluation))
    if analysis is not None:
        advice, actions, tech = _repository_improvements(project, analysis)
        improvements.extend(advice)
        action_plan.extend(actions)
        tech_suggestions.extend(tech)
    improvements.extend(_plagiarism_improvement(project))

    tech_suggestions.extend(
        f'{suggestion} (for "{project.project_name}")'
        for suggestion in domain_tech_suggestions(project.domain, languages)
    )

    if evaluation is not None:
        ranked = _ranked_scores(evaluation)
        if ranked:
            weakest, value = ranked[0]
            action_plan.append(
                f"Your weakest area is {_humanize(weakest)} at {value}/10. Spend 2 hours "
                f'focused on improving this for "{project.project_name}"'
            )
        if len(ranked) > 1:
            second, value = ranked[1]
            reason = evaluation.explanations.get(second) or "needs attention"
            action_plan.append(f"Next priority: {_humanize(second)} scored {value}/10. {reason}")

    if analysis is not None and languages:
        action_plan.append(
            f"Your stack uses {', '.join(languages)}. Add proper error handling specific to "
            f"your {languages[0]} codebase"
        )
    if analysis is not None and analysis.cleanliness_score < 6:
        files = f"{languages[0]} files" if languages else "files"
        action_plan.append(
            f"Code cleanliness is {analysis.cleanliness_score}/10. Remove debug output and "
            f"unused imports, and add comments in your {files}"
        )

    action_plan.append(
        f'Practice a 3-minute demo of "{project.project_name}" showing the core '
        f"{project.domain} user flow end-to-end"
    )
    if project.presentation is None:
        action_plan.append(
            f'Create a 6-8 slide deck for "{project.project_name}": Problem in '
            f"{project.domain}, Your Solution, Live Demo, Architecture, Impact"
        )

    return MentorshipResult(
        verification=verification,
        improvements=tuple(improvements),
        action_plan=tuple(action_plan),
        tech_suggestions=tuple(dedupe(tech_suggestions)[:MAX_TECH_SUGGESTIONS]),
        overall_advice=_overall_advice(project, evaluation, languages),
        timestamp=timestamp,
        source="rules",
    )


__all__ = ["domain_tech_suggestions", "rule_based_mentorship"]
