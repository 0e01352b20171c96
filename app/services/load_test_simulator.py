"""
Load test simulation.

Computes peak capacity, sustained and degradation load, response-time and
throughput curves, and the bottlenecks expected before the breaking point.
"""

from typing import List, Tuple

from app.models.simulation_models import FeatureType, IntegrationType, PlatformSpec
from app.models.result_models import (
    Bottleneck,
    BottleneckType,
    LoadTestResult,
    ResponseTimePoint,
    Severity,
    ThroughputPoint,
)
from app.utils.reference_data import TIER_PROFILES, round_half_up

AUTO_SCALING_MULTIPLIER = 3
REDUNDANCY_MULTIPLIER = 1.5
SUSTAINED_LOAD_RATIO = 0.7
DEGRADATION_RATIO = 0.85

CURVE_START_USERS = 10
CURVE_MIN_STEP = 10
CURVE_POINTS = 20

MAX_API_INTEGRATIONS = 3


class LoadTestSimulator:
    """Closed-form load model for a platform spec."""

    def simulate(self, spec: PlatformSpec) -> LoadTestResult:
        """
        Compute capacity figures, load curves and bottlenecks.

        Args:
            spec: Platform description

        Returns:
            LoadTestResult
        """
        max_users = self.max_concurrent_users(spec)
        response_curve, throughput_curve = self.build_curves(max_users)

        return LoadTestResult(
            maxConcurrentUsers=max_users,
            sustainedLoad=round_half_up(max_users * SUSTAINED_LOAD_RATIO),
            degradationPoint=round_half_up(max_users * DEGRADATION_RATIO),
            responseTimeCurve=response_curve,
            throughputCurve=throughput_curve,
            bottlenecks=self.detect_bottlenecks(spec),
        )

    def max_concurrent_users(self, spec: PlatformSpec) -> int:
        infra = spec.infrastructure
        capacity = TIER_PROFILES[infra.tier].capacity
        scaling = AUTO_SCALING_MULTIPLIER if infra.autoScaling else 1
        redundancy = REDUNDANCY_MULTIPLIER if infra.redundancy else 1
        return round_half_up(capacity * scaling * redundancy)

    def detect_bottlenecks(self, spec: PlatformSpec) -> List[Bottleneck]:
        """Each check fires independently; several may apply."""
        bottlenecks: List[Bottleneck] = []

        if any(f.dataIntensive for f in spec.features):
            bottlenecks.append(
                Bottleneck(
                    component="Database",
                    type=BottleneckType.DATABASE,
                    severity=Severity.MEDIUM,
                    threshold=80,
                    current=65,
                    recommendation="Consider read replicas and connection pooling",
                )
            )

        if any(f.type == FeatureType.AI_INFERENCE for f in spec.features):
            bottlenecks.append(
                Bottleneck(
                    component="AI Processing",
                    type=BottleneckType.CPU,
                    severity=Severity.HIGH,
                    threshold=90,
                    current=75,
                    recommendation="Implement request queuing and batch processing",
                )
            )

        api_integrations = [i for i in spec.integrations if i.type == IntegrationType.API]
        if len(api_integrations) > MAX_API_INTEGRATIONS:
            bottlenecks.append(
                Bottleneck(
                    component="External APIs",
                    type=BottleneckType.EXTERNAL_API,
                    severity=Severity.MEDIUM,
                    threshold=100,
                    current=80,
                    recommendation="Implement circuit breakers and caching",
                )
            )

        return bottlenecks

    def build_curves(
        self, max_users: int
    ) -> Tuple[List[ResponseTimePoint], List[ThroughputPoint]]:
        """
        Sample response time and throughput from CURVE_START_USERS up to max_users.

        Past the degradation ratio response time climbs linearly on top of
        the quadratic term and throughput falls off.
        """
        response_curve: List[ResponseTimePoint] = []
        throughput_curve: List[ThroughputPoint] = []
        if max_users <= 0:
            return response_curve, throughput_curve

        step = max(CURVE_MIN_STEP, round_half_up(max_users / CURVE_POINTS))
        for users in range(CURVE_START_USERS, max_users + 1, step):
            load = users / max_users
            overload = load - DEGRADATION_RATIO
            response_time = 50 + 150 * load ** 2 + (500 * overload if overload > 0 else 0)
            efficiency = 1 if load < DEGRADATION_RATIO else 1 - overload * 2
            response_curve.append(
                ResponseTimePoint(users=users, responseTime=round_half_up(response_time))
            )
            throughput_curve.append(
                ThroughputPoint(users=users, throughput=round_half_up(users * 10 * efficiency))
            )

        return response_curve, throughput_curve
