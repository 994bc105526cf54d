"""Run the spaceflight mouse physiology model for one set of mission parameters."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pydantic import ValidationError

from src.simulation import (
    ExerciseCountermeasure,
    GeneticStrain,
    GravityExposure,
    MissionSimulator,
    SimulationHistory,
    SimulationInputs,
    StressReactivity,
)

DEFAULTS = SimulationInputs()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--mission-days",
        type=float,
        default=DEFAULTS.mission_days,
        help="Mission length in days (0-60).",
    )
    parser.add_argument(
        "--strain",
        choices=[s.value for s in GeneticStrain],
        default=DEFAULTS.genetic_strain.value,
        help="Genetic strain of the cohort.",
    )
    parser.add_argument(
        "--gravity-exposure",
        choices=[g.value for g in GravityExposure],
        default=DEFAULTS.altered_gravity_exposure.value,
        help="Pre-flight altered-gravity training frequency.",
    )
    parser.add_argument(
        "--confinement-tolerance",
        type=float,
        default=DEFAULTS.confinement_tolerance_score,
        help="Confinement tolerance score (0-10).",
    )
    parser.add_argument(
        "--isolation-days",
        type=float,
        default=DEFAULTS.social_isolation_days,
        help="Pre-flight social isolation days (0-21).",
    )
    parser.add_argument(
        "--health",
        type=float,
        default=DEFAULTS.baseline_health_score,
        help="Baseline health score (0-100).",
    )
    parser.add_argument(
        "--stress-reactivity",
        choices=[s.value for s in StressReactivity],
        default=DEFAULTS.stress_reactivity.value,
    )
    parser.add_argument(
        "--activity",
        type=float,
        default=DEFAULTS.activity_level,
        help="In-flight activity level (0-1).",
    )
    parser.add_argument(
        "--exercise",
        choices=[e.value for e in ExerciseCountermeasure],
        default=DEFAULTS.exercise_countermeasure.value,
        help="Exercise countermeasure intensity.",
    )
    parser.add_argument(
        "--diet",
        type=float,
        default=DEFAULTS.diet_vs_baseline,
        help="Diet relative to baseline (0.6-1.2).",
    )
    parser.add_argument(
        "--history",
        type=Path,
        help="JSON file of saved runs; the new run is appended and the file rewritten.",
    )
    parser.add_argument("--name", help="Name of the saved run (with --history).")
    return parser.parse_args()


def _load_history(path: Path) -> SimulationHistory:
    history = SimulationHistory()
    if path.exists():
        try:
            history.import_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Could not read simulation history {path}: {exc}") from exc
    return history


def main() -> None:
    args = parse_args()
    try:
        inputs = SimulationInputs(
            mission_days=args.mission_days,
            genetic_strain=GeneticStrain(args.strain),
            altered_gravity_exposure=GravityExposure(args.gravity_exposure),
            confinement_tolerance_score=args.confinement_tolerance,
            social_isolation_days=args.isolation_days,
            baseline_health_score=args.health,
            stress_reactivity=StressReactivity(args.stress_reactivity),
            activity_level=args.activity,
            exercise_countermeasure=ExerciseCountermeasure(args.exercise),
            diet_vs_baseline=args.diet,
        )
    except ValidationError as exc:
        raise SystemExit(f"Invalid simulation inputs:\n{exc}") from exc

    if args.history is None:
        outputs = MissionSimulator().simulate(inputs)
    else:
        history = _load_history(args.history)
        history.inputs = inputs
        outputs = history.run()
        history.add(args.name)
        args.history.write_text(history.export_json(), encoding="utf-8")
    print(json.dumps(outputs.model_dump(), indent=2))


if __name__ == "__main__":
    main()
