"""
Abstractions shared by the simulation pipeline.

- SimulationContext: everything a rule may look at, assembled once per run
- ISimulationStore: keyed storage for finished simulation results
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from app.models.simulation_models import PlatformSpec
from app.models.result_models import (
    FailurePoint,
    LoadTestResult,
    PerformanceMetrics,
    SimulationResult,
    StressTestResult,
)


@dataclass(frozen=True)
class SimulationContext:
    """Inputs and derived metrics visible to detection and recommendation rules."""

    spec: PlatformSpec
    performance: PerformanceMetrics
    load: LoadTestResult
    stress: StressTestResult
    failure_points: List[FailurePoint] = field(default_factory=list)


class ISimulationStore(ABC):
    """Interface for storing and looking up simulation results."""

    @abstractmethod
    def add(self, result: SimulationResult) -> None:
        """Publish a finished result."""

    @abstractmethod
    def get(self, simulation_id: str) -> Optional[SimulationResult]:
        """Return the result with the given id, or None."""

    @abstractmethod
    def list_all(self) -> List[SimulationResult]:
        """Return every stored result, newest first."""
