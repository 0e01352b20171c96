"""
Stress test simulation.

Models behaviour beyond rated capacity: breaking point, recovery time,
graceful degradation, cascade failures and resource exhaustion.
"""

from typing import List

from app.models.simulation_models import (
    DataVolume,
    FeatureType,
    InfrastructureTier,
    PlatformSpec,
    Sector,
    SecurityLevel,
)
from app.models.result_models import (
    CascadeFailure,
    CascadeImpact,
    ResourceExhaustion,
    StressTestResult,
)
from app.utils.reference_data import TIER_PROFILES, round_half_up

AUTO_SCALING_HEADROOM = 4
STATIC_HEADROOM = 1.5

AUTO_SCALING_RECOVERY_MS = 30000
STATIC_RECOVERY_MS = 120000

DB_EXHAUSTION_RATIO = 0.7
MEMORY_EXHAUSTION_RATIO = 0.6


class StressTestSimulator:
    """Predicts how a platform fails when pushed past its capacity."""

    def simulate(self, spec: PlatformSpec) -> StressTestResult:
        """
        Compute the stress profile for the given spec.

        Args:
            spec: Platform description

        Returns:
            StressTestResult
        """
        breaking_point = self.breaking_point(spec)
        auto_scaling = spec.infrastructure.autoScaling

        return StressTestResult(
            breakingPoint=breaking_point,
            recoveryTime=AUTO_SCALING_RECOVERY_MS if auto_scaling else STATIC_RECOVERY_MS,
            gracefulDegradation=spec.infrastructure.tier != InfrastructureTier.STARTER,
            cascadeFailures=self.cascade_failures(spec),
            resourceExhaustion=self.resource_exhaustion(spec, breaking_point),
        )

    def breaking_point(self, spec: PlatformSpec) -> int:
        capacity = TIER_PROFILES[spec.infrastructure.tier].capacity
        headroom = AUTO_SCALING_HEADROOM if spec.infrastructure.autoScaling else STATIC_HEADROOM
        return round_half_up(capacity * headroom)

    def cascade_failures(self, spec: PlatformSpec) -> List[CascadeFailure]:
        if spec.securityLevel == SecurityLevel.MILITARY or spec.sector == Sector.FINANCIAL:
            return [
                CascadeFailure(
                    trigger="Authentication service overload",
                    affectedComponents=["API Gateway", "Session Management", "Audit Logging"],
                    propagationTime=5000,
                    impact=CascadeImpact.MAJOR,
                )
            ]
        return []

    def resource_exhaustion(
        self, spec: PlatformSpec, breaking_point: int
    ) -> List[ResourceExhaustion]:
        exhaustion: List[ResourceExhaustion] = []

        if spec.dataVolume in (DataVolume.LARGE, DataVolume.MASSIVE):
            exhaustion.append(
                ResourceExhaustion(
                    resource="Database Connections",
                    exhaustionPoint=breaking_point * DB_EXHAUSTION_RATIO,
                    recoveryStrategy="Connection pool expansion and query optimization",
                )
            )

        if any(f.type == FeatureType.FILE_PROCESSING for f in spec.features):
            exhaustion.append(
                ResourceExhaustion(
                    resource="Memory",
                    exhaustionPoint=breaking_point * MEMORY_EXHAUSTION_RATIO,
                    recoveryStrategy="Stream processing and temporary file cleanup",
                )
            )

        return exhaustion
