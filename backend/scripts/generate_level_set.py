#!/usr/bin/env python3
"""
Generate a batch of levels across seeds and totals, then replay each one.

Reports attempts, adjustments and any level the verifier rejects. Useful as a
regression sweep after touching the generator.

Usage:
    python scripts/generate_level_set.py --difficulty hard --seeds 200
    python scripts/generate_level_set.py -d all -o levels.json
"""
import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Dict, List, Any

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from legodash.core.generator import LevelGenerator
from legodash.models.level import Difficulty, GenerationFailure, GenerationParams
from legodash.utils.helpers import format_stand

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

DEFAULT_TOTALS = [54, 63, 72, 81, 90, 99]


def run_sweep(
    generator: LevelGenerator,
    difficulty: Difficulty,
    totals: List[int],
    seeds: int,
    verbose: bool = False,
) -> Dict[str, Any]:
    """Generate every (total, seed) pair and re-validate the output."""
    levels = []
    failures = []
    attempts = []
    start = time.time()

    for total in totals:
        for seed in range(seeds):
            params = GenerationParams(total_bricks=total, difficulty=difficulty, seed=seed)
            result = generator.generate(params)

            if isinstance(result, GenerationFailure):
                failures.append({"total": total, "seed": seed, **result.to_dict()})
                logger.warning(f"  {difficulty.value} total={total} seed={seed}: {result.message}")
                continue

            report = generator.validate(
                result.stands, result.tasks, difficulty, result.adjusted_total
            )
            if not report.success:
                failures.append({"total": total, "seed": seed, "kind": "revalidation",
                                 "message": report.message})
                logger.error(f"  {difficulty.value} total={total} seed={seed}: {report.message}")
                continue

            attempts.append(result.attempts)
            levels.append({"total": total, "seed": seed, **result.to_level_dict(
                level_name=f"{difficulty.value}_{total}_{seed}")})

            if verbose:
                logger.info(f"  total={total} seed={seed} attempts={result.attempts}")
                for i, stand in enumerate(result.stands):
                    logger.info(f"    stand {i + 1}: {format_stand(stand)}")

    elapsed = time.time() - start
    generated = len(levels)
    logger.info(
        f"{difficulty.value}: {generated}/{generated + len(failures)} levels ok, "
        f"avg attempts {sum(attempts) / max(1, len(attempts)):.2f}, {elapsed:.1f}s"
    )
    return {"difficulty": difficulty.value, "levels": levels, "failures": failures}


def main():
    parser = argparse.ArgumentParser(description="Generate and verify a LegoDash level set")
    parser.add_argument("--difficulty", "-d", type=str, choices=["easy", "medium", "hard", "all"],
                        default="all", help="Difficulty tier(s) to sweep")
    parser.add_argument("--seeds", "-s", type=int, default=50,
                        help="Seeds per total (default: 50)")
    parser.add_argument("--totals", "-t", type=int, nargs="+", default=DEFAULT_TOTALS,
                        help="Brick totals to generate")
    parser.add_argument("--output", "-o", type=str, default=None,
                        help="Output file for generated levels (JSON)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log every stand of every level")
    args = parser.parse_args()

    tiers = list(Difficulty) if args.difficulty == "all" else [Difficulty(args.difficulty)]
    generator = LevelGenerator()

    results = [run_sweep(generator, tier, args.totals, args.seeds, args.verbose) for tier in tiers]
    failed = sum(len(r["failures"]) for r in results)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)
        logger.info(f"Saved to {args.output}")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
