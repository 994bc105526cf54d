"""Parametric spaceflight physiology model."""

from .history import Comparison, SimulationExport, SimulationHistory, SimulationRun
from .model import (
    Coefficients,
    ExerciseCountermeasure,
    GeneticStrain,
    GravityExposure,
    MissionSimulator,
    SimulationConfig,
    SimulationInputs,
    SimulationOutputs,
    StrainModifier,
    StressReactivity,
)

__all__ = [
    "Coefficients",
    "Comparison",
    "ExerciseCountermeasure",
    "GeneticStrain",
    "GravityExposure",
    "MissionSimulator",
    "SimulationConfig",
    "SimulationExport",
    "SimulationHistory",
    "SimulationInputs",
    "SimulationOutputs",
    "SimulationRun",
    "StrainModifier",
    "StressReactivity",
]
