"""Project-specific follow-up questions for judges."""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .models import EvaluationResult, PlagiarismAssessment, Project, RepositoryAnalysis
from .utils import dedupe

MAX_QUESTIONS = 7
MIN_BEFORE_PROBES = 5
MAX_FOLLOWUPS = 3

TECH_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("react", "React"), ("next.js", "Next.js"), ("nextjs", "Next.js"),
    ("vue", "Vue.js"), ("angular", "Angular"), ("svelte", "Svelte"),
    ("node.js", "Node.js"), ("nodejs", "Node.js"), ("express", "Express"),
    ("django", "Django"), ("flask", "Flask"), ("fastapi", "FastAPI"),
    ("spring boot", "Spring Boot"), ("springboot", "Spring Boot"),
    ("python", "Python"), ("javascript", "JavaScript"), ("typescript", "TypeScript"),
    ("java", "Java"), ("c++", "C++"), ("rust", "Rust"), ("golang", "Go"), ("go", "Go"),
    ("tensorflow", "TensorFlow"), ("pytorch", "PyTorch"), ("keras", "Keras"),
    ("opencv", "OpenCV"), ("scikit", "scikit-learn"),
    ("mongodb", "MongoDB"), ("postgresql", "PostgreSQL"), ("mysql", "MySQL"),
    ("firebase", "Firebase"), ("supabase", "Supabase"), ("redis", "Redis"),
    ("docker", "Docker"), ("kubernetes", "Kubernetes"),
    ("aws", "AWS"), ("azure", "Azure"), ("gcp", "GCP"),
    ("graphql", "GraphQL"), ("rest api", "REST API"), ("websocket", "WebSocket"),
    ("blockchain", "Blockchain"), ("solidity", "Solidity"), ("ethereum", "Ethereum"),
    ("arduino", "Arduino"), ("raspberry pi", "Raspberry Pi"), ("esp32", "ESP32"),
    ("mqtt", "MQTT"), ("flutter", "Flutter"), ("react native", "React Native"),
    ("tailwind", "Tailwind CSS"), ("bootstrap", "Bootstrap"),
    ("openai", "OpenAI API"), ("gpt", "GPT"), ("llm", "LLM"), ("bert", "BERT"),
    ("langchain", "LangChain"), ("hugging face", "Hugging Face"),
    ("stripe", "Stripe"), ("razorpay", "Razorpay"),
    ("socket", "Socket.io"), ("socketio", "Socket.io"),
)

_FEATURE_PATTERNS: Tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"(?:detect|identifies?|recogni[sz]e)\s+([^,.]+)",
        r"(?:predict|forecast|estimat)\s+([^,.]+)",
        r"(?:automat|generat|creat)\w*\s+([^,.]+)",
        r"(?:monitor|track|analyz)\w*\s+([^,.]+)",
        r"(?:recommend|suggest)\w*\s+([^,.]+)",
        r"(?:connect|integrat)\w*\s+(?:with\s+)?([^,.]+)",
        r"(?:real[- ]time)\s+([^,.]+)",
    )
)

# (trigger substrings, question template) probed in this order.
_TOPIC_QUESTIONS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (
        ("machine learning", "ml", "model"),
        'What dataset did you use to train your model in "{name}"? '
        "What's the accuracy, and how did you validate it?",
    ),
    (
        ("api", "backend", "server"),
        'What API endpoints does "{name}" expose? How do you handle authentication and rate limiting?',
    ),
    (
        ("database", "data", "storage"),
        'How does "{name}" handle data persistence? What\'s your database schema design?',
    ),
    (
        ("real-time", "realtime", "live"),
        'How does the real-time feature in "{name}" work? '
        "What protocol do you use and how do you handle disconnections?",
    ),
    (
        ("security", "encrypt", "auth"),
        'What security measures does "{name}" implement? How do you handle user data protection?',
    ),
    (
        ("ai", "artificial intelligence", "gpt", "llm"),
        'Is "{name}" using a pre-trained AI model or did you build your own? '
        "What's the AI doing that couldn't be done with simple logic?",
    ),
    (
        ("mobile", "app", "android", "ios"),
        'Is "{name}" a native app or web-based? '
        "How do you handle offline functionality and different screen sizes?",
    ),
    (
        ("blockchain", "smart contract", "web3"),
        'Which blockchain network does "{name}" deploy on? What\'s the gas cost per transaction?',
    ),
    (
        ("iot", "sensor", "hardware", "arduino"),
        'What hardware components does "{name}" use? '
        "How do you handle sensor calibration and data accuracy?",
    ),
)

DOMAIN_PROBES: Dict[str, Tuple[str, ...]] = {
    "AI/ML": (
        'What dataset did you use for "{name}"? How did you handle bias and class imbalance?',
        'Show us your model\'s confusion matrix or accuracy metrics for "{name}".',
    ),
    "HealthTech": (
        'How does "{name}" comply with data privacy regulations like HIPAA or India\'s DISHA?',
        'Did you validate "{name}" with real healthcare professionals? What feedback did you get?',
    ),
    "FinTech": (
        'How does "{name}" handle failed transactions and edge cases like double payments?',
        'What encryption and security standards does "{name}" use for financial data?',
    ),
    "EdTech": (
        'How does "{name}" measure actual learning outcomes, not just engagement?',
        'What accessibility features does "{name}" have for differently-abled students?',
    ),
    "Blockchain": (
        'What\'s the actual decentralization benefit of "{name}" over a traditional database?',
        'What\'s the gas cost per transaction in "{name}"? How do you optimize it?',
    ),
    "IoT": (
        'How does "{name}" handle sensor calibration drift and noisy data?',
        'What\'s "{name}"\'s power consumption strategy for battery-operated devices?',
    ),
    "Cybersecurity": (
        'What specific threat model does "{name}" address? Show us a demo of the detection.',
        'How does "{name}" minimize false positives in threat detection?',
    ),
    "SmartCities": (
        'What real-time data sources does "{name}" integrate with? How do you handle data latency?',
        'How does "{name}" ensure equitable access across different neighborhoods?',
    ),
    "AgriTech": (
        'How does "{name}" work for small-hold farmers with limited smartphone access?',
        'What\'s the accuracy of your prediction model in "{name}"? Validated against what data?',
    ),
    "Sustainability": (
        'What measurable environmental impact metrics does "{name}" track?',
        'How does "{name}" incentivize sustained behavior change, not just one-time actions?',
    ),
    "Gaming": (
        'How does "{name}" handle real-time multiplayer synchronization and cheating?',
        'What\'s your monetization model for "{name}" - is it fair or pay-to-win?',
    ),
    "SocialImpact": (
        'How do you quantitatively measure social impact of "{name}"?',
        'What\'s "{name}"\'s sustainability model beyond hackathon/grants?',
    ),
    "Other": (
        'Who is the target user of "{name}" and how did you validate the need exists?',
        'What\'s "{name}"\'s competitive advantage over existing solutions?',
    ),
}

UNIVERSAL_PROBES: Tuple[str, ...] = (
    'What was the single biggest technical challenge you faced building "{name}" and how did you solve it?',
    'If you had 2 more weeks, what\'s the #1 feature you\'d add to "{name}"?',
    'Walk us through "{name}"\'s architecture - draw it on the whiteboard right now.',
    'Show us the most complex function in "{name}" and explain the logic line by line.',
)


def _mentions(text: str, keyword: str) -> bool:
    pattern = r"(?<![a-z0-9])" + re.escape(keyword) + r"(?![a-z0-9])"
    return re.search(pattern, text) is not None


def extract_tech_stack(
    description: str, analysis: Optional[RepositoryAnalysis] = None
) -> List[str]:
    """Technologies named in the description, then repository languages."""
    lowered = (description or "").lower()
    techs = [name for keyword, name in TECH_KEYWORDS if _mentions(lowered, keyword)]
    if analysis is not None and analysis.fetched:
        known = {tech.lower() for tech in techs}
        techs.extend(lang for lang in analysis.languages if lang.lower() not in known)
    return dedupe(techs)


def extract_features(description: str, limit: int = 5) -> List[str]:
    """Short phrases following action verbs such as "detect" or "predict"."""
    lowered = (description or "").lower()
    features: List[str] = []
    for pattern in _FEATURE_PATTERNS:
        for match in pattern.finditer(lowered):
            feature = match.group(1).strip()[:40]
            if len(feature) > 3:
                features.append(feature)
    return features[:limit]


def _repository_questions(project: Project, analysis: Optional[RepositoryAnalysis]) -> List[str]:
    name = project.project_name
    if analysis is None or not analysis.fetched:
        if not project.github_url or not project.github_url.strip():
            return [
                f'You haven\'t provided a GitHub link for "{name}" - can you open your codebase '
                "and walk us through the architecture?"
            ]
        return [
            f"We couldn't access your GitHub repo ({project.github_url}) - is it private? "
            "Can you make it public or show us the code structure?"
        ]

    questions: List[str] = []
    members = len(project.active_members)
    if analysis.burst_commit_score >= 70:
        if analysis.total_commits <= 3:
            questions.append(
                f'Your repo "{analysis.name}" has only {analysis.total_commits} commit(s). '
                "That's very unusual for a hackathon project - was all the code written and "
                "pushed at once? Walk us through your development timeline."
            )
        elif len(analysis.commit_timeline) == 1:
            questions.append(
                f'All {analysis.total_commits} commits in "{analysis.name}" were pushed on '
                f"{analysis.commit_timeline[0].date}. This pattern suggests AI-generated or "
                "pre-existing code. Can you explain your actual development process?"
            )
        else:
            questions.append(
                "The commit pattern in your repo shows rapid-fire commits "
                f"(avg {analysis.avg_time_between_commits}h apart). Did you use an AI tool to "
                "generate the code? Walk us through what YOU personally wrote."
            )
    if analysis.is_forked:
        questions.append(
            "Your repository is a fork. What specific changes did YOUR team make to the "
            "original codebase? Show us your unique contributions."
        )
    if analysis.single_author_percent == 100 and members >= 2 and analysis.total_commits > 2:
        author = analysis.commit_authors[0] if analysis.commit_authors else "one author"
        questions.append(
            f'Only "{author}" appears in the commit history, but you have {members} team '
            "members. How did the others contribute? Why don't they have commits?"
        )
    if not analysis.has_tests and analysis.total_files > 5:
        questions.append(
            f"Your codebase has {analysis.total_files} files but no test files. How do you "
            f'verify that "{name}" works correctly? What\'s your testing approach?'
        )
    if analysis.modularity_score <= 4:
        questions.append(
            f"Your code structure is quite flat ({analysis.total_dirs} directories, "
            f'{analysis.total_files} files). How do you handle separation of concerns in "{name}"?'
        )
    languages = list(analysis.languages)
    if len(languages) >= 2:
        questions.append(
            f"Your repo uses {', '.join(languages[:3])}. Explain the architecture - which "
            f'language handles what part of "{name}"?'
        )
    return questions


def _description_questions(project: Project, analysis: Optional[RepositoryAnalysis]) -> List[str]:
    name = project.project_name
    lowered = (project.description or "").lower()
    questions: List[str] = []

    techs = extract_tech_stack(project.description, analysis)
    if techs:
        questions.append(
            f'You\'re using {" + ".join(techs[:2])} in "{name}". What made you choose this '
            "stack over alternatives? What challenges did you face with it?"
        )
    for feature in extract_features(project.description):
        questions.append(
            f'You mention {feature} in "{name}" - how exactly does this work? '
            "Show us the implementation and explain the logic."
        )
    for triggers, template in _TOPIC_QUESTIONS:
        if any(trigger in lowered for trigger in triggers):
            questions.append(template.format(name=name))
    return questions


def _score_questions(
    project: Project,
    evaluation: Optional[EvaluationResult],
    plagiarism: Optional[PlagiarismAssessment],
) -> List[str]:
    name = project.project_name
    questions: List[str] = []
    if evaluation is not None:
        scores = evaluation.scores
        if scores.get("innovation", 10) <= 4:
            questions.append(
                f'"{name}" scored low on innovation. What makes your solution different from '
                "existing ones? What's your unique angle?"
            )
        if scores.get("technical_feasibility", 10) <= 4:
            questions.append(
                f'The technical feasibility score for "{name}" is low. Can you demo a working '
                "feature right now?"
            )
        if scores.get("code_quality", 10) <= 4:
            questions.append(
                f'Code quality concerns in "{name}" - show us your error handling, logging, '
                "and how you manage edge cases."
            )
        if scores.get("impact", 0) >= 8:
            questions.append(
                f'"{name}" shows strong impact potential. What\'s your 6-month roadmap to go '
                "from hackathon to real users?"
            )
        if scores.get("mvp_completeness", 10) <= 4:
            questions.append(
                f'"{name}" seems incomplete. What\'s the minimum set of features needed to '
                "make this usable, and how far are you?"
            )
    if plagiarism is not None and plagiarism.overall_score > 50:
        questions.append(
            f"Your project flagged {plagiarism.overall_score}% on plagiarism detection. Can you "
            "open your code editor and show us which parts YOU personally wrote?"
        )
    return questions


def domain_probes(project: Project) -> List[str]:
    name = project.project_name
    probes = DOMAIN_PROBES.get(project.domain) or DOMAIN_PROBES["Other"]
    return [template.format(name=name) for template in (*probes, *UNIVERSAL_PROBES)]


def generate_questions(
    project: Project,
    analysis: Optional[RepositoryAnalysis] = None,
    evaluation: Optional[EvaluationResult] = None,
    plagiarism: Optional[PlagiarismAssessment] = None,
) -> List[str]:
    """Return up to seven questions, most evidence-backed first.

    Rules run in a fixed order: repository evidence, description keywords and
    features, score thresholds, then a missing-deck prompt. Domain probes only
    top the list up when fewer than five questions were produced.
    """
    analysis = analysis if analysis is not None else project.analysis
    evaluation = evaluation if evaluation is not None else project.evaluation
    plagiarism = plagiarism if plagiarism is not None else project.plagiarism

    questions: List[str] = []
    questions.extend(_repository_questions(project, analysis))
    questions.extend(_description_questions(project, analysis))
    questions.extend(_score_questions(project, evaluation, plagiarism))
    if project.presentation is None:
        questions.append(
            f'No presentation was uploaded for "{project.project_name}". Can you give a '
            "2-minute verbal pitch covering the problem, solution, and demo?"
        )

    if len(questions) < MIN_BEFORE_PROBES:
        for probe in domain_probes(project):
            if probe not in questions:
                questions.append(probe)
            if len(questions) >= MAX_QUESTIONS:
                break

    return dedupe(questions)[:MAX_QUESTIONS]


_FOLLOWUP_RULES: Tuple[Tuple[str, Callable[[int], bool], str], ...] = (
    (
        "innovation",
        lambda value: value <= 4,
        'What existing solutions did you study before building "{name}", and how is your '
        "approach fundamentally different?",
    ),
    (
        "technical_feasibility",
        lambda value: value <= 4,
        'Can you demo error handling in "{name}"? Show us what happens when something fails.',
    ),
    (
        "impact",
        lambda value: value >= 8,
        '"{name}" has great impact potential - what partnerships or deployments could you '
        "pursue in the next 3 months?",
    ),
    (
        "code_quality",
        lambda value: value <= 4,
        'Walk us through a specific function in "{name}" - explain the logic, variable naming, '
        "and how you'd refactor it.",
    ),
    (
        "originality",
        lambda value: value <= 4,
        'The originality score is low for "{name}". What part of the code is 100% written by '
        "your team? Show us.",
    ),
)


def generate_score_followups(project: Project, scores: Mapping[str, int]) -> List[str]:
    """Up to three follow-ups triggered by extreme criterion scores, in score order."""
    rules = {key: (check, template) for key, check, template in _FOLLOWUP_RULES}
    followups: List[str] = []
    for key, value in scores.items():
        rule = rules.get(key)
        if rule is not None and rule[0](value):
            followups.append(rule[1].format(name=project.project_name))
    return followups[:MAX_FOLLOWUPS]


__all__ = [
    "MAX_QUESTIONS",
    "domain_probes",
    "extract_features",
    "extract_tech_stack",
    "generate_questions",
    "generate_score_followups",
]
