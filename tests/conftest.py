from __future__ import annotations

import os

import pytest

from skillpath.schemas.jobs import JobPosting
from skillpath.services.skill_normalizer import SkillNormalizer


def pytest_configure() -> None:
    # Keep a developer's local .env out of the test run.
    os.environ["SKILLPATH_ENVIRONMENT"] = "test"


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def normalizer() -> SkillNormalizer:
    return SkillNormalizer()


@pytest.fixture()
def corpus() -> list[JobPosting]:
    return [
        JobPosting(
            id="1",
            title="Senior Backend Engineer",
            company="Google",
            required_skills=["Python", "Django", "PostgreSQL", "Docker"],
            salary=160_000,
            employer_tier=5,
            source="fixture",
        ),
        JobPosting(
            id="2",
            title="Frontend Developer",
            company="Shopify",
            required_skills=["JavaScript", "React.js", "CSS", "HTML"],
            salary=120_000,
            employer_tier=4,
            source="fixture",
        ),
        JobPosting(
            id="3",
            title="Full Stack Developer",
            company="Acme",
            required_skills=["javascript", "node.js", "react", "mongodb"],
            salary=100_000,
            employer_tier=2,
            source="fixture",
        ),
        JobPosting(
            id="4",
            title="Data Engineer",
            company="IBM",
            required_skills=["python", "sql", "spark", "docker"],
            employer_tier=3,
            source="fixture",
        ),
        JobPosting(
            id="5",
            title="DevOps Engineer",
            company="Stripe",
            required_skills=["k8s", "Docker", "AWS", "terraform", "linux"],
            salary=140_000,
            employer_tier=4,
            source="fixture",
        ),
        JobPosting(
            id="6",
            title="Junior Python Developer",
            company="Startup",
            required_skills=["Python", "Flask", "SQL", "git"],
            salary=70_000,
            source="fixture",
        ),
    ]
