from __future__ import annotations

import pytest

from skillpath.schemas.jobs import JobPosting
from skillpath.services.job_enrichment import (
    classify_employer_tier,
    enrich_posting,
    extract_salary,
    extract_skills_from_text,
)


def test_extract_skills_in_order_of_appearance() -> None:
    text = "We use React.js, Node.js and Docker; K8s experience is a plus. More Docker."
    assert extract_skills_from_text(text) == ["react", "nodejs", "docker", "kubernetes"]


def test_extract_skills_respects_word_boundaries_and_exclusions() -> None:
    text = "Strong C++ and C# skills. Familiar with Webpack and Axios. Javascript experts wanted."
    skills = extract_skills_from_text(text)
    assert "c++" in skills
    assert "c#" in skills
    assert "javascript" in skills
    assert "webpack" not in skills
    assert "axios" not in skills
    # "java" must not be read out of "javascript".
    assert "java" not in skills


def test_extract_skills_empty() -> None:
    assert extract_skills_from_text("") == []
    assert extract_skills_from_text("Great team, good snacks.") == []


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Pays $120,000 plus equity", 120_000.0),
        ("Compensation: $95k base", 95_000.0),
        ("150,000 annually", 150_000.0),
        ("Salary range 85000 depending on experience", 85_000.0),
        ("Competitive pay", None),
        ("", None),
    ],
)
def test_extract_salary(text: str, expected: float | None) -> None:
    assert extract_salary(text) == expected


def test_classify_employer_tier() -> None:
    assert classify_employer_tier("Google LLC") == 5
    assert classify_employer_tier("Stripe") == 4
    assert classify_employer_tier("IBM Research") == 3
    assert classify_employer_tier("Acme Widgets") == 2
    assert classify_employer_tier("   ") is None
    # Fragments must match whole words.
    assert classify_employer_tier("Metaphysics Ltd") == 2
    assert classify_employer_tier("Foo", tiers={1: ("foo",)}) == 1


def test_enrich_posting_fills_missing_fields_only() -> None:
    posting = JobPosting(
        id="raw",
        title="Backend Developer",
        company="Shopify",
        description="Work with Python and PostgreSQL. $130,000 per year.",
    )
    enriched = enrich_posting(posting)
    assert enriched is not posting
    assert enriched.required_skills == ("python", "postgresql")
    assert enriched.salary == 130_000.0
    assert enriched.employer_tier == 4
    assert posting.required_skills == ()


def test_enrich_posting_leaves_complete_posting_untouched(corpus: list[JobPosting]) -> None:
    complete = corpus[0]
    assert enrich_posting(complete) is complete
