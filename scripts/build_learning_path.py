from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from skillpath.config import configure_logging, get_settings  # noqa: E402
from skillpath.engine import build_engine  # noqa: E402
from skillpath.exceptions import PrerequisiteCycleError  # noqa: E402
from skillpath.services.providers import InMemoryReferenceProvider  # noqa: E402
from skillpath.services.timeline import distribute_path  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Build a learning path and weekly timeline for one skill.")
    parser.add_argument("skill", help="Target skill, e.g. 'kubernetes'")
    parser.add_argument("--reference", type=Path, default=None, help="JSON object mapping skill -> graph payload")
    parser.add_argument("--current", default="", help="Comma-separated skills already known")
    parser.add_argument("--duration", choices=["3-month", "6-month", "12-month"], default=settings.default_duration)
    parser.add_argument("--hours", type=int, default=settings.default_hours_per_week, help="Hours per week")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    reference = None
    if args.reference is not None:
        payloads = json.loads(args.reference.read_text(encoding="utf-8"))
        reference = InMemoryReferenceProvider.from_payloads(payloads)

    engine = build_engine(settings, reference=reference)
    current = [s for s in args.current.split(",") if s.strip()]
    try:
        path = asyncio.run(engine.builder.build(args.skill, current))
    except PrerequisiteCycleError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if not path.nodes:
        print(f"error: no learnable skill in {args.skill!r}", file=sys.stderr)
        return 1

    timeline = distribute_path(path, args.duration, args.hours, start_date=args.start)
    print(json.dumps({"path": path.model_dump(mode="json"), "timeline": timeline.model_dump(mode="json")}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
