from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from .model import MissionSimulator, SimulationInputs, SimulationOutputs

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


class SimulationRun(BaseModel):
    id: str
    timestamp: int  # epoch milliseconds
    name: str
    inputs: SimulationInputs
    outputs: SimulationOutputs


class CurrentSimulation(BaseModel):
    inputs: SimulationInputs
    outputs: Optional[SimulationOutputs] = None


class SimulationExport(BaseModel):
    current_simulation: Optional[CurrentSimulation] = None
    history: Optional[List[SimulationRun]] = None
    timestamp: int = 0
    version: str = EXPORT_VERSION


@dataclass(frozen=True)
class Comparison:
    current: SimulationOutputs
    selected: SimulationRun

    @property
    def differences(self) -> Dict[str, float]:
        """Current minus selected, per output field."""
        current = self.current.model_dump()
        selected = self.selected.outputs.model_dump()
        return {name: current[name] - selected[name] for name in current}


def _now_ms() -> int:
    return int(time.time() * 1000)


class SimulationHistory:
    """
    Working scenario plus a list of saved runs to compare against.

    Holds the current inputs, the outputs of the last ``run`` and the saved
    runs in insertion order. At most one saved run is selected for
    comparison; removing it or clearing the list drops the selection.
    """

    def __init__(
        self,
        simulator: Optional[MissionSimulator] = None,
        *,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.simulator = simulator or MissionSimulator()
        self._clock = clock
        self.inputs = SimulationInputs()
        self.outputs: Optional[SimulationOutputs] = None
        self.runs: List[SimulationRun] = []
        self.selected_id: Optional[str] = None

    def update_inputs(self, **changes: Any) -> SimulationInputs:
        self.inputs = SimulationInputs(**{**self.inputs.model_dump(), **changes})
        return self.inputs

    def run(self) -> SimulationOutputs:
        self.outputs = self.simulator.simulate(self.inputs)
        return self.outputs

    def reset(self) -> None:
        self.inputs = SimulationInputs()
        self.outputs = None

    # --------------------------
    # Saved runs
    # --------------------------

    def add(self, name: Optional[str] = None) -> Optional[SimulationRun]:
        """Save the current scenario. Nothing is saved before the first ``run``."""
        if self.outputs is None:
            return None

        entry = SimulationRun(
            id=f"sim_{uuid.uuid4().hex[:12]}",
            timestamp=self._clock(),
            name=name or f"Simulation {len(self.runs) + 1}",
            inputs=self.inputs,
            outputs=self.outputs,
        )
        self.runs.append(entry)
        return entry

    def get(self, run_id: str) -> SimulationRun:
        for entry in self.runs:
            if entry.id == run_id:
                return entry
        raise KeyError(run_id)

    def remove(self, run_id: str) -> None:
        self.runs = [entry for entry in self.runs if entry.id != run_id]
        if self.selected_id == run_id:
            self.selected_id = None

    def clear(self) -> None:
        self.runs = []
        self.selected_id = None

    def select(self, run_id: str) -> SimulationRun:
        entry = self.get(run_id)
        self.selected_id = run_id
        return entry

    def compare(self) -> Optional[Comparison]:
        """Current outputs against the selected run, or None if either is missing."""
        if self.outputs is None or self.selected_id is None:
            return None
        return Comparison(current=self.outputs, selected=self.get(self.selected_id))

    # --------------------------
    # Export / import
    # --------------------------

    def export_json(self) -> str:
        export = SimulationExport(
            current_simulation=CurrentSimulation(inputs=self.inputs, outputs=self.outputs),
            history=self.runs,
            timestamp=self._clock(),
        )
        return export.model_dump_json(indent=2)

    def import_json(self, data: str) -> None:
        """
        Restore state from ``export_json`` output.

        The payload is validated before anything is replaced, so a bad payload
        leaves the history untouched and raises ``ValueError``.
        """
        try:
            parsed = SimulationExport.model_validate_json(data)
        except ValidationError as exc:
            logger.error("Rejected simulation import: %s", exc)
            raise ValueError(f"Invalid simulation export: {exc}") from exc

        if parsed.current_simulation is not None:
            self.inputs = parsed.current_simulation.inputs
            self.outputs = parsed.current_simulation.outputs
        if parsed.history is not None:
            self.runs = list(parsed.history)
            if self.selected_id is not None and all(e.id != self.selected_id for e in self.runs):
                self.selected_id = None
        logger.info("Imported simulation state with %d saved runs", len(self.runs))
