"""Readiness score aggregation."""

from typing import Callable, List, Tuple

from app.models.result_models import (
    FailurePoint,
    LoadTestResult,
    PerformanceMetrics,
    Severity,
    SimulationStatus,
    StressTestResult,
)
from app.utils.reference_data import round_half_up

COMPLETED_THRESHOLD = 70
WARNING_THRESHOLD = 50

# (predicate, penalty) pairs; every matching entry is subtracted
PERFORMANCE_PENALTIES: List[Tuple[Callable[[PerformanceMetrics], bool], int]] = [
    (lambda p: p.averageResponseTime > 500, 10),
    (lambda p: p.averageResponseTime > 1000, 15),
    (lambda p: p.p99ResponseTime > 2000, 10),
    (lambda p: p.errorRate > 0.01, 15),
    (lambda p: p.errorRate > 0.05, 20),
    (lambda p: p.cpuUtilization > 80, 10),
    (lambda p: p.memoryUtilization > 85, 10),
]

STRESS_PENALTIES: List[Tuple[Callable[[StressTestResult], bool], int]] = [
    (lambda s: not s.gracefulDegradation, 10),
    (lambda s: len(s.cascadeFailures) > 0, 15),
    (lambda s: len(s.resourceExhaustion) > 0, 10),
]

BOTTLENECK_PENALTIES = {Severity.CRITICAL: 10, Severity.HIGH: 5}
DEFAULT_BOTTLENECK_PENALTY = 2

FAILURE_POINT_PENALTIES = {Severity.CRITICAL: 15, Severity.HIGH: 8, Severity.MEDIUM: 4}


class ScoreAggregator:
    """Folds all simulation outputs into a single 0-100 readiness score."""

    def score(
        self,
        performance: PerformanceMetrics,
        load: LoadTestResult,
        stress: StressTestResult,
        failure_points: List[FailurePoint],
    ) -> int:
        """
        Start from 100 and subtract every applicable penalty.

        Returns:
            Score clamped to [0, 100]
        """
        score = 100
        score -= sum(penalty for check, penalty in PERFORMANCE_PENALTIES if check(performance))
        score -= sum(
            BOTTLENECK_PENALTIES.get(b.severity, DEFAULT_BOTTLENECK_PENALTY)
            for b in load.bottlenecks
        )
        score -= sum(penalty for check, penalty in STRESS_PENALTIES if check(stress))
        score -= sum(FAILURE_POINT_PENALTIES.get(f.severity, 0) for f in failure_points)
        return max(0, min(100, round_half_up(score)))

    @staticmethod
    def status_for(score: int) -> SimulationStatus:
        """Map a score onto its status bucket."""
        if score >= COMPLETED_THRESHOLD:
            return SimulationStatus.COMPLETED
        if score >= WARNING_THRESHOLD:
            return SimulationStatus.WARNING
        return SimulationStatus.FAILED
