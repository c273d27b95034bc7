#!/usr/bin/env python3
"""Validate a specs directory and summarize it.

Usage:
  python -m specdesk.scripts.spec_report specs/
  python -m specdesk.scripts.spec_report specs/ --json
  python -m specdesk.scripts.spec_report specs/ --errors-only
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path

from specdesk.models import IssueSeverity, ValidationResult
from specdesk.parsers.specs import SpecReader
from specdesk.services.stats import calculate_stats
from specdesk.services.validation import validate_all_specs


def _filter_errors(results: list[ValidationResult]) -> list[ValidationResult]:
    filtered: list[ValidationResult] = []
    for result in results:
        issues = [i for i in result.issues if i.severity == IssueSeverity.ERROR]
        if issues:
            filtered.append(result.model_copy(update={"issues": issues}))
    return filtered


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("specs_dir")
    parser.add_argument("--project-id", default="local")
    parser.add_argument("--errors-only", action="store_true")
    parser.add_argument("--json", action="store_true")
    args = parser.parse_args(argv)

    specs_dir = Path(args.specs_dir)
    if not specs_dir.is_dir():
        print(f"Specs directory not found: {specs_dir}")
        return 1

    specs = SpecReader(specs_dir, args.project_id).load_all()
    results = validate_all_specs(specs)
    stats = calculate_stats(specs)
    if args.errors_only:
        results = _filter_errors(results)
    invalid = [r for r in results if not r.valid]

    if args.json:
        payload = {
            "specs_dir": str(specs_dir),
            "stats": stats.model_dump(),
            "invalid_count": len(invalid),
            "results": [r.model_dump(mode="json") for r in results],
        }
        print(json.dumps(payload, indent=2))
        return 1 if invalid else 0

    print(f"Specs: {stats.totalSpecs} ({stats.activeSpecs} active, {stats.completionRate}% complete)")
    for entry in stats.specsByStatus:
        print(f"  {entry.status}: {entry.count}")
    print("")
    for result in results:
        if not result.issues:
            continue
        marker = "ok" if result.valid else "INVALID"
        print(f"{result.specName} [{marker}]")
        for issue in result.issues:
            print(f"    {issue.severity.value:<7} {issue.code}: {issue.message}")
    print("")
    print(f"Invalid specs: {len(invalid)}")
    return 1 if invalid else 0


if __name__ == "__main__":
    raise SystemExit(main())
