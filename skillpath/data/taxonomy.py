# taxonomy.py
"""Domain taxonomy tables used by relationship scoring, enrichment and gap analysis.

All skill names here are canonical (see `skillpath.data.vocabulary.SYNONYMS`).
"""

from __future__ import annotations


# Fixed domain clusters. A skill may belong to several clusters (python is both backend and data).
SKILL_CLUSTERS: dict[str, tuple[str, ...]] = {
    "frontend": ("html", "css", "javascript", "typescript", "react", "vue", "angular", "sass"),
    "backend": ("nodejs", "python", "java", "django", "flask", "spring", "express", "sql"),
    "devops": ("docker", "kubernetes", "aws", "azure", "linux", "terraform", "ci/cd"),
    "data": ("python", "machine learning", "tensorflow", "pandas", "sql", "spark"),
    "mobile": ("react native", "flutter", "ios", "android", "swift", "kotlin"),
}

CLUSTER_MEMBERSHIP_WEIGHT = 0.8
CLUSTER_BRIDGE_WEIGHT = 0.6

# Relationship bonus: flat part when the job needs a neighbour of the skill, plus a centrality share.
RELATED_NEIGHBOR_BONUS = 0.3
RELATED_CENTRALITY_SHARE = 0.2


# Employer name fragments by tier (5 = top tier). Unknown employers default to DEFAULT_EMPLOYER_TIER.
EMPLOYER_TIERS: dict[int, tuple[str, ...]] = {
    5: ("google", "apple", "microsoft", "amazon", "meta", "facebook", "netflix", "tesla", "nvidia", "openai"),
    4: ("uber", "airbnb", "spotify", "stripe", "shopify", "github", "gitlab", "slack", "zoom", "salesforce"),
    3: ("ibm", "oracle", "adobe", "intel", "cisco", "vmware", "atlassian", "dropbox"),
}
DEFAULT_EMPLOYER_TIER = 2


# Rough hours to reach working proficiency.
LEARNING_TIME_ESTIMATES: dict[str, int] = {
    "javascript": 40,
    "typescript": 25,
    "react": 30,
    "angular": 35,
    "vue": 25,
    "python": 35,
    "java": 40,
    "c#": 35,
    "nodejs": 25,
    "express": 15,
    "django": 30,
    "flask": 20,
    "sql": 20,
    "mongodb": 15,
    "postgresql": 20,
    "docker": 15,
    "kubernetes": 30,
    "aws": 25,
    "azure": 25,
    "gcp": 25,
    "machine learning": 60,
    "data analysis": 40,
    "git": 10,
    "testing": 20,
    "agile": 15,
    "scrum": 10,
}
DEFAULT_LEARNING_TIME = 25

# Checked in order; the first tier whose fragment appears in the skill name wins.
INTERVIEW_IMPORTANCE: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("critical", ("javascript", "data structures", "algorithms", "system design")),
    ("high", ("react", "typescript", "python", "sql", "aws", "docker")),
    ("medium", ("angular", "vue", "nodejs", "mongodb", "testing")),
)
