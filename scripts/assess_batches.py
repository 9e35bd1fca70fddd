"""Assess crop batches from a JSON file and print the results."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from harvest_guard.core.exceptions import InvalidBatch
from harvest_guard.core.logging_config import setup_logging
from harvest_guard.models import CropBatch
from harvest_guard.services.assessment import build_assessment_service
from harvest_guard.services.environment import SyntheticEnvironmentSource
from harvest_guard.services.environment_cache import EnvironmentCache

_BATCHES = TypeAdapter(list[CropBatch])


async def run(path: Path, locale: str, synthetic: bool) -> int:
    try:
        batches = _BATCHES.validate_json(path.read_bytes())
    except (OSError, ValidationError) as exc:
        print(f"Could not read batches from {path}: {exc}", file=sys.stderr)
        return 1

    cache = EnvironmentCache(SyntheticEnvironmentSource(seed=0)) if synthetic else None
    service = build_assessment_service(cache=cache)

    assessments = []
    for batch in batches:
        if not batch.is_active:
            continue
        try:
            assessment = await service.assess_batch(batch, locale=locale)
        except InvalidBatch as exc:
            print(f"Skipping batch: {exc}", file=sys.stderr)
            continue
        assessments.append(assessment.model_dump(mode="json"))

    summary = await service.assess_portfolio(batches, locale=locale)
    output = {
        "assessments": assessments,
        "portfolio": summary.model_dump(mode="json") if summary else None,
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Assess storage risk for crop batches.")
    parser.add_argument("path", type=Path, help="JSON file holding a list of batches.")
    parser.add_argument("--locale", choices=("en", "bn"), default="en", help="Suggestion language.")
    parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Use synthetic weather instead of the configured provider.",
    )
    args = parser.parse_args()

    setup_logging(service_name="assess-batches")
    sys.exit(asyncio.run(run(args.path, args.locale, args.synthetic)))


if __name__ == "__main__":
    main()
