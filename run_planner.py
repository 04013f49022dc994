"""
Load planner runner — command-line entry point.

Places every item of a manifest into a container with the auto-placement
search, then reports the load summary and the step-by-step load plan.

Usage (CLI):
    python run_planner.py --manifest manifests/sample_manifest.yaml
    python run_planner.py --generate 12 --seed 7 --container 40hc --json

Usage (Python):
    from run_planner import run_planner
    result = run_planner(manifest, container="40ft")
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

# Put the project root on the path so all packages resolve cleanly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import (
    CONTAINER_SPECS, DEFAULT_GRID_SIZE, DEFAULT_PLANNER_CONFIG, GRID_SIZES,
    PlannerConfig, load_planner_config,
)
from manifest.generator import generate_from_library
from manifest.loader import Manifest, load_manifest
from planner.engine import LoadPlanner
from planner.errors import DimensionsExceedContainerError

logger = logging.getLogger("run_planner")


# ─────────────────────────────────────────────────────────────────────────────
# Core API
# ─────────────────────────────────────────────────────────────────────────────

def run_planner(
    manifest: Manifest,
    container: Optional[str] = None,
    grid_size: float = DEFAULT_GRID_SIZE,
    snap_enabled: bool = True,
    cfg: PlannerConfig = DEFAULT_PLANNER_CONFIG,
) -> dict:
    """
    Place a manifest and build its load plan.

    The container is, in order of precedence: *container*, the manifest's
    own container, then "20ft".

    Returns:
        dict with keys: manifest, container, summary, rejected, issues, plan.
    """
    planner = LoadPlanner(
        container or manifest.container or "20ft",
        grid_size=grid_size, snap_enabled=snap_enabled, cfg=cfg,
    )

    rejected = []
    for entry in manifest.entries:
        try:
            planner.add_many(entry.template, entry.quantity)
        except DimensionsExceedContainerError as e:
            logger.warning("%s", e)
            rejected.append({"name": entry.template.name, "quantity": entry.quantity,
                             "reason": str(e)})

    issues = [
        dict(item_id=item_id, label=planner.get_item(item_id).label, **result.to_dict())
        for item_id, result in planner.validate_all().items()
        if not result.is_clean
    ]

    return {
        "manifest": manifest.name,
        "container": planner.container.to_dict(),
        "summary": planner.summary().to_dict(),
        "rejected": rejected,
        "issues": issues,
        "plan": [step.to_dict() for step in planner.load_plan()],
    }


def print_report(result: dict) -> None:
    container = result["container"]
    summary = result["summary"]
    dist = summary["distribution"]

    print(f"\n  Manifest:     {result['manifest']}")
    print(f"  Container:    {container['label']} "
          f"({container['length']:g}\" x {container['width']:g}\" x {container['height']:g}\")")
    print(f"  Items:        {summary['item_count']}")
    print(f"  Weight:       {summary['total_weight']:,.0f} / {summary['max_weight']:,.0f} lbs "
          f"({summary['payload_pct']:.1f}%)")
    print(f"  Volume used:  {summary['utilization']:.1f}%")
    print(f"  Front/Back:   {dist['front']:.0f}/{dist['back']:.0f}   "
          f"Left/Right: {dist['left']:.0f}/{dist['right']:.0f}"
          f"{'' if summary['balanced'] else '   (unbalanced)'}")
    print("-" * 65)

    for rej in result["rejected"]:
        print(f"  REJECTED  {rej['name']} x{rej['quantity']}: {rej['reason']}")
    for found in result["issues"]:
        for msg in found["errors"] + found["warnings"]:
            print(f"  ISSUE     {msg}")

    for step in result["plan"]:
        print(f"\n  STEP {step['step']}: {step['label']}")
        print(f"    {step['instruction']}")
        for tip in step["tips"]:
            print(f"    - {tip}")
        print(f"    Cumulative: {step['cumulative_weight']:,.0f} lbs, "
              f"{step['cumulative_utilization']:.1f}% volume")


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Container Load Planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_planner.py --manifest manifests/sample_manifest.yaml
  python run_planner.py --generate 12 --seed 7 --container 40hc
  python run_planner.py --manifest m.yaml --grid 12 --json > plan.json
        """,
    )

    src = parser.add_mutually_exclusive_group()
    src.add_argument("--manifest", type=str, help="Path to manifest YAML / JSON")
    src.add_argument("--generate", type=int, metavar="N",
                     help="Generate N random items from the library")
    parser.add_argument("--seed", type=int, default=42)

    parser.add_argument("--container", choices=sorted(CONTAINER_SPECS), default=None)
    parser.add_argument("--grid", type=int, choices=GRID_SIZES, default=DEFAULT_GRID_SIZE)
    parser.add_argument("--no-snap", action="store_true",
                        help="Disable grid snapping (search in 1 inch steps)")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML file overriding planner thresholds")

    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = load_planner_config(args.config) if args.config else DEFAULT_PLANNER_CONFIG

    if args.manifest:
        manifest = load_manifest(args.manifest)
    else:
        n = args.generate or 10
        container = CONTAINER_SPECS[args.container or "20ft"]
        manifest = generate_from_library(n, container=container, seed=args.seed)

    result = run_planner(
        manifest, container=args.container, grid_size=args.grid,
        snap_enabled=not args.no_snap, cfg=cfg,
    )

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_report(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
