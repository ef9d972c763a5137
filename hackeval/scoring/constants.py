"""Rubric table and keyword lists used by the heuristic scorer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Criterion:
    """One rubric row. ``weight_percent`` values across the rubric sum to 100."""

    key: str
    label: str
    weight_percent: int

    @property
    def weight(self) -> float:
        return self.weight_percent / 100


CRITERIA: Tuple[Criterion, ...] = (
    Criterion("innovation", "Innovation", 25),
    Criterion("technical_feasibility", "Technical Feasibility", 20),
    Criterion("impact", "Impact / Potential", 20),
    Criterion("mvp_completeness", "MVP Completeness", 10),
    Criterion("presentation", "Presentation", 10),
    Criterion("code_quality", "Code Quality", 5),
    Criterion("team_collaboration", "Team Collaboration", 5),
    Criterion("originality", "Originality", 5),
)

CRITERION_KEYS: Tuple[str, ...] = tuple(criterion.key for criterion in CRITERIA)
CRITERION_WEIGHTS: Dict[str, float] = {criterion.key: criterion.weight for criterion in CRITERIA}

# Keyword tiers per domain: (high, medium, low).
DOMAIN_TECH: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "AI/ML": {
        "high": (
            "transformer", "neural network", "deep learning", "reinforcement learning",
            "llm", "gpt", "bert", "diffusion", "fine-tuning", "rag", "vector database",
            "embeddings", "cnn", "rnn", "lstm",
        ),
        "medium": (
            "machine learning", "classification", "regression", "nlp", "computer vision",
            "opencv", "pytorch", "tensorflow", "scikit", "model training", "dataset",
            "prediction", "clustering",
        ),
        "low": ("ai", "artificial intelligence", "data", "algorithm", "automation", "smart"),
    },
    "HealthTech": {
        "high": (
            "ehr", "fhir", "hl7", "medical imaging", "dicom", "telemedicine", "drug discovery",
            "clinical trials", "genomics", "pathology", "radiology",
        ),
        "medium": (
            "health monitoring", "patient portal", "diagnosis", "wearable", "fitness tracker",
            "symptom checker", "medical records", "healthcare api",
        ),
        "low": ("health", "wellness", "doctor", "hospital", "medicine", "patient"),
    },
    "FinTech": {
        "high": (
            "payment gateway", "smart contract", "defi", "kyc", "aml", "algorithmic trading",
            "tokenization", "credit scoring model", "fraud detection",
        ),
        "medium": (
            "banking api", "upi", "wallet", "investment", "insurance", "loan", "transaction",
            "portfolio", "budgeting",
        ),
        "low": ("finance", "money", "payment", "banking", "fintech"),
    },
    "Blockchain": {
        "high": (
            "solidity", "smart contract", "consensus mechanism", "zero-knowledge", "zk-proof",
            "evm", "web3", "ipfs", "dao", "cross-chain",
        ),
        "medium": (
            "ethereum", "polygon", "nft", "token", "defi", "dapp", "metamask", "hardhat",
            "truffle", "blockchain node",
        ),
        "low": ("blockchain", "crypto", "decentralized", "ledger", "distributed"),
    },
    "IoT": {
        "high": (
            "mqtt", "embedded systems", "microcontroller", "fpga", "rtos", "edge computing",
            "sensor fusion", "digital twin",
        ),
        "medium": (
            "arduino", "raspberry pi", "esp32", "lora", "zigbee", "ble", "sensor", "actuator",
            "gpio", "firmware",
        ),
        "low": ("iot", "connected", "device", "smart device", "automation"),
    },
    "Cybersecurity": {
        "high": (
            "zero-day", "penetration testing", "cryptography", "vulnerability assessment",
            "siem", "intrusion detection", "reverse engineering", "threat modeling",
        ),
        "medium": (
            "firewall", "encryption", "authentication", "oauth", "jwt", "xss", "sql injection",
            "malware", "phishing detection", "security audit",
        ),
        "low": ("security", "privacy", "protection", "safe", "secure"),
    },
    "EdTech": {
        "high": (
            "adaptive learning", "learning management system", "gamification engine",
            "spaced repetition", "intelligent tutoring",
        ),
        "medium": (
            "online learning", "quiz platform", "video streaming", "virtual classroom",
            "progress tracking", "assessment", "curriculum",
        ),
        "low": ("education", "learning", "teaching", "student", "course", "school"),
    },
    "SmartCities": {
        "high": (
            "traffic optimization", "urban planning ai", "smart grid", "waste management system",
            "gis", "geospatial",
        ),
        "medium": (
            "parking system", "public transport", "air quality", "water management",
            "surveillance", "civic engagement", "infrastructure",
        ),
        "low": ("city", "urban", "smart", "municipal", "public"),
    },
    "AgriTech": {
        "high": (
            "precision agriculture", "crop disease detection", "soil analysis", "drone mapping",
            "yield prediction",
        ),
        "medium": (
            "irrigation", "farm management", "livestock", "weather prediction", "supply chain",
            "marketplace",
        ),
        "low": ("agriculture", "farming", "crop", "plant", "food"),
    },
    "Sustainability": {
        "high": (
            "carbon footprint calculator", "renewable energy optimization", "circular economy",
            "life cycle assessment",
        ),
        "medium": (
            "solar", "wind energy", "recycling", "emission tracking", "sustainable supply chain",
            "green energy",
        ),
        "low": ("sustainability", "environment", "green", "eco", "climate"),
    },
    "Gaming": {
        "high": (
            "game engine", "procedural generation", "multiplayer networking",
            "physics simulation", "shader programming",
        ),
        "medium": (
            "unity", "unreal", "godot", "webgl", "3d rendering", "ai npc", "level design",
            "matchmaking",
        ),
        "low": ("game", "gaming", "play", "player", "interactive"),
    },
    "SocialImpact": {
        "high": (
            "impact measurement", "beneficiary tracking", "social enterprise model",
            "inclusive design",
        ),
        "medium": (
            "ngo platform", "donation tracking", "volunteer management", "accessibility",
            "community engagement",
        ),
        "low": ("social", "community", "impact", "help", "charity"),
    },
    "Other": {
        "high": ("microservices", "distributed systems", "real-time processing", "graphql", "grpc"),
        "medium": (
            "api", "database", "cloud", "docker", "kubernetes", "ci/cd", "rest", "websocket",
        ),
        "low": ("web", "app", "platform", "system", "tool"),
    },
}

TIER_WEIGHTS: Dict[str, float] = {"high": 1.5, "medium": 0.8, "low": 0.3}

TECH_COMPLEXITY_HIGH: Tuple[str, ...] = (
    "microservices", "kubernetes", "docker", "ci/cd", "graphql", "grpc", "websocket",
    "real-time", "distributed", "load balancing", "caching", "redis", "elasticsearch",
    "message queue", "kafka", "rabbitmq", "serverless", "lambda", "terraform",
    "infrastructure as code",
)
TECH_COMPLEXITY_MEDIUM: Tuple[str, ...] = (
    "react", "next.js", "vue", "angular", "node.js", "express", "django", "flask", "fastapi",
    "spring boot", "postgresql", "mongodb", "firebase", "supabase", "aws", "azure", "gcp",
    "typescript", "tailwind", "authentication", "authorization",
)
COMPLEXITY_WEIGHTS: Tuple[float, float] = (0.7, 0.3)

INNOVATION_WORDS: Tuple[str, ...] = (
    "novel", "unique", "first", "pioneering", "revolutionary", "innovative", "breakthrough",
    "new approach", "rethink", "reimagine", "disrupt", "patent", "original",
)
GENERIC_WORDS: Tuple[str, ...] = (
    "simple", "basic", "todo", "clone", "copy", "like uber", "like netflix",
)
IMPACT_WORDS: Tuple[str, ...] = (
    "users", "millions", "scale", "solve", "problem", "community", "accessibility",
    "affordable", "real-world", "deployment", "production", "impact", "lives", "society",
    "reduce", "improve", "transform",
)

HIGH_IMPACT_DOMAINS: Tuple[str, ...] = ("HealthTech", "SocialImpact")

# Upper bound of the tie-breaking noise added to each criterion.
JITTER_AMPLITUDE: Dict[str, float] = {
    "innovation": 0.8,
    "technical_feasibility": 0.5,
    "impact": 0.6,
    "mvp_completeness": 0.5,
    "code_quality": 0.5,
    "originality": 0.5,
}

VERDICTS: Tuple[Tuple[float, str, str], ...] = (
    (8.0, "Outstanding", "Strong contender for top placement"),
    (6.5, "Impressive", "Above-average project with solid execution"),
    (5.0, "Promising", "Good foundation with room for improvement"),
    (3.5, "Needs Work", "Several areas require attention"),
)
FALLBACK_VERDICT: Tuple[str, str] = (
    "Incomplete",
    "Major areas need significant improvement",
)

__all__ = [
    "COMPLEXITY_WEIGHTS",
    "CRITERIA",
    "CRITERION_KEYS",
    "CRITERION_WEIGHTS",
    "Criterion",
    "DOMAIN_TECH",
    "FALLBACK_VERDICT",
    "GENERIC_WORDS",
    "HIGH_IMPACT_DOMAINS",
    "IMPACT_WORDS",
    "INNOVATION_WORDS",
    "JITTER_AMPLITUDE",
    "TECH_COMPLEXITY_HIGH",
    "TECH_COMPLEXITY_MEDIUM",
    "TIER_WEIGHTS",
    "VERDICTS",
]
