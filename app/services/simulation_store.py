"""
In-process simulation result store.

Single responsibility: keep finished results keyed by id. Reads and writes
go through one lock so concurrent requests on a threaded host never observe
a half-updated map. Results are copied on the way in and on the way out, so
callers never hold a reference into the stored state.
"""

import threading
from typing import Dict, List, Optional, Tuple

from app.models.result_models import SimulationResult
from app.services.simulation_interfaces import ISimulationStore


class InMemorySimulationStore(ISimulationStore):
    """Thread-safe dictionary-backed store. Results live for the process lifetime."""

    def __init__(self):
        self._lock = threading.Lock()
        # id -> (insertion sequence, result)
        self._results: Dict[str, Tuple[int, SimulationResult]] = {}
        self._sequence = 0

    def add(self, result: SimulationResult) -> None:
        stored = result.model_copy(deep=True)
        with self._lock:
            self._sequence += 1
            self._results[stored.id] = (self._sequence, stored)

    def get(self, simulation_id: str) -> Optional[SimulationResult]:
        with self._lock:
            entry = self._results.get(simulation_id)
        return entry[1].model_copy(deep=True) if entry else None

    def list_all(self) -> List[SimulationResult]:
        with self._lock:
            entries = list(self._results.values())
        entries.sort(key=lambda e: (e[1].startedAt, e[0]), reverse=True)
        return [result.model_copy(deep=True) for _, result in entries]

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
