from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field


class GeneticStrain(str, Enum):
    C57BL_6 = "C57BL/6"
    BALB_C = "BALB/c"
    S129S1 = "129S1"
    OTHER = "Other"


class GravityExposure(str, Enum):
    NONE = "none"
    WEEKLY = "weekly"
    DAILY = "daily"


class StressReactivity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExerciseCountermeasure(str, Enum):
    NONE = "none"
    LOW = "low"
    HIGH = "high"


class SimulationInputs(BaseModel):
    """Mission, pre-flight training and in-flight parameters for one mouse cohort."""

    model_config = ConfigDict(frozen=True)

    mission_days: float = Field(default=30, ge=0, le=60)
    genetic_strain: GeneticStrain = GeneticStrain.C57BL_6
    altered_gravity_exposure: GravityExposure = GravityExposure.WEEKLY
    confinement_tolerance_score: float = Field(default=7, ge=0, le=10)
    social_isolation_days: float = Field(default=3, ge=0, le=21)
    baseline_health_score: float = Field(default=85, ge=0, le=100)
    stress_reactivity: StressReactivity = StressReactivity.MEDIUM
    activity_level: float = Field(default=0.6, ge=0, le=1)
    exercise_countermeasure: ExerciseCountermeasure = ExerciseCountermeasure.LOW
    diet_vs_baseline: float = Field(default=1.0, ge=0.6, le=1.2)


class SimulationOutputs(BaseModel):
    model_config = ConfigDict(frozen=True)

    bone_mineral_density_delta: float  # percent
    muscle_mass_delta: float  # percent, cross-sectional area
    immune_function_index_delta: float  # percent, composite
    resting_hr_delta: float  # bpm
    map_delta: float  # mmHg


@dataclass(frozen=True)
class Coefficients:
    bone_gravity: float = -0.8
    bone_activity: float = 0.3
    bone_exercise: float = 0.4
    bone_diet: float = 0.2

    muscle_gravity: float = -0.6
    muscle_activity: float = 0.5
    muscle_exercise: float = 0.6
    muscle_diet: float = 0.3

    immune_stress: float = -0.4
    immune_isolation: float = -0.3
    immune_health: float = 0.4
    immune_diet: float = 0.2

    hr_stress: float = 0.3
    hr_activity: float = -0.2
    hr_health: float = -0.3

    map_stress: float = 0.4
    map_activity: float = -0.1
    map_health: float = -0.2


@dataclass(frozen=True)
class StrainModifier:
    bone_resistance: float
    muscle_resistance: float
    immune_resistance: float
    cardiovascular_resistance: float


DEFAULT_STRAIN_MODIFIERS: Mapping[GeneticStrain, StrainModifier] = {
    GeneticStrain.C57BL_6: StrainModifier(0.8, 0.7, 0.6, 0.7),
    GeneticStrain.BALB_C: StrainModifier(0.6, 0.5, 0.8, 0.5),
    GeneticStrain.S129S1: StrainModifier(0.9, 0.8, 0.5, 0.8),
    GeneticStrain.OTHER: StrainModifier(0.7, 0.7, 0.7, 0.7),
}

GRAVITY_TRAINING_BONUS: Mapping[GravityExposure, float] = {
    GravityExposure.NONE: 0.0,
    GravityExposure.WEEKLY: 0.2,
    GravityExposure.DAILY: 0.4,
}

REACTIVITY_STRESS: Mapping[StressReactivity, float] = {
    StressReactivity.LOW: 0.1,
    StressReactivity.MEDIUM: 0.3,
    StressReactivity.HIGH: 0.5,
}

EXERCISE_LOAD: Mapping[ExerciseCountermeasure, float] = {
    ExerciseCountermeasure.NONE: 0.0,
    ExerciseCountermeasure.LOW: 0.3,
    ExerciseCountermeasure.HIGH: 0.6,
}

FULL_MISSION_DAYS = 60
MAX_ISOLATION_DAYS = 21


@dataclass(frozen=True)
class SimulationConfig:
    coefficients: Coefficients = field(default_factory=Coefficients)
    strain_modifiers: Mapping[GeneticStrain, StrainModifier] = field(
        default_factory=lambda: dict(DEFAULT_STRAIN_MODIFIERS)
    )


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, digits: int) -> float:
    """Round to ``digits`` decimals with ties going toward positive infinity."""
    quantum = Decimal(1).scaleb(-digits)
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return float(Decimal(str(value)).quantize(quantum, rounding=rounding))


class MissionSimulator:
    """Linear model of physiological changes in mice over a spaceflight mission."""

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or SimulationConfig()

    def training_effectiveness(self, inputs: SimulationInputs) -> float:
        effectiveness = 0.5
        effectiveness += GRAVITY_TRAINING_BONUS[inputs.altered_gravity_exposure]
        effectiveness += inputs.confinement_tolerance_score / 10 * 0.3
        effectiveness -= inputs.social_isolation_days / MAX_ISOLATION_DAYS * 0.2
        return _clamp(effectiveness)

    def stress_level(self, inputs: SimulationInputs) -> float:
        stress = 0.3
        stress += (100 - inputs.baseline_health_score) / 100 * 0.4
        stress += REACTIVITY_STRESS[inputs.stress_reactivity]
        stress += inputs.social_isolation_days / MAX_ISOLATION_DAYS * 0.2
        return _clamp(stress)

    def simulate(self, inputs: SimulationInputs) -> SimulationOutputs:
        c = self.config.coefficients
        strain = self.config.strain_modifiers[inputs.genetic_strain]

        intensity = min(inputs.mission_days / FULL_MISSION_DAYS, 1.0)
        training = self.training_effectiveness(inputs)
        stress = self.stress_level(inputs)
        exercise = EXERCISE_LOAD[inputs.exercise_countermeasure]
        diet = inputs.diet_vs_baseline - 1
        isolation = inputs.social_isolation_days / MAX_ISOLATION_DAYS
        health = inputs.baseline_health_score / 100

        bone = (
            c.bone_gravity * intensity
            + c.bone_activity * training
            + c.bone_exercise * exercise
            + c.bone_diet * diet
        ) * strain.bone_resistance * 100

        muscle = (
            c.muscle_gravity * intensity
            + c.muscle_activity * training
            + c.muscle_exercise * exercise
            + c.muscle_diet * diet
        ) * strain.muscle_resistance * 100

        immune = (
            c.immune_stress * stress
            + c.immune_isolation * isolation
            + c.immune_health * health
            + c.immune_diet * diet
        ) * strain.immune_resistance * 100

        resting_hr = (
            c.hr_stress * stress * 20
            + c.hr_activity * inputs.activity_level * 10
            + c.hr_health * health * 15
        ) * strain.cardiovascular_resistance

        mean_arterial = (
            c.map_stress * stress * 15
            + c.map_activity * inputs.activity_level * 5
            + c.map_health * health * 10
        ) * strain.cardiovascular_resistance

        return SimulationOutputs(
            bone_mineral_density_delta=round_half_up(bone, 2),
            muscle_mass_delta=round_half_up(muscle, 2),
            immune_function_index_delta=round_half_up(immune, 2),
            resting_hr_delta=round_half_up(resting_hr, 1),
            map_delta=round_half_up(mean_arterial, 1),
        )
