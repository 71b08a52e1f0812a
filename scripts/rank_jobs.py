from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from pydantic import TypeAdapter  # noqa: E402

from skillpath.config import configure_logging  # noqa: E402
from skillpath.engine import build_engine  # noqa: E402
from skillpath.schemas.jobs import JobPosting  # noqa: E402
from skillpath.services.recommendation_service import recommend_jobs  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rank a JSON job corpus against a skill list.")
    parser.add_argument("corpus", type=Path, help="JSON file holding a list of job postings")
    parser.add_argument("--skills", required=True, help="Comma-separated skills, e.g. 'python, react.js, k8s'")
    parser.add_argument("--years", type=float, default=None, help="Years of experience (enables compatibility)")
    parser.add_argument("--experience-mode", choices=["gate", "reweight"], default=None)
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    raw = json.loads(args.corpus.read_text(encoding="utf-8"))
    jobs = TypeAdapter(list[JobPosting]).validate_python(raw)

    engine = build_engine()
    ranked = recommend_jobs(
        engine,
        args.skills,
        jobs,
        limit=args.limit,
        user_years=args.years,
        experience_mode=args.experience_mode,
    )

    out = [
        {
            "id": r.job.id,
            "title": r.job.title,
            "company": r.job.company,
            "score": round(r.score, 2),
            "matched": r.matched_skills,
            "missing": r.missing_skills,
            "breakdown": r.breakdown.model_dump(),
            "experience_compatibility": r.experience_compatibility,
        }
        for r in ranked
    ]
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
