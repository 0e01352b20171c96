"""
Performance simulation for a planned platform.

Derives steady-state latency, throughput and resource utilization from a
PlatformSpec with closed-form formulas. Pure: no I/O, no randomness.
"""

from app.models.simulation_models import Complexity, FeatureType, PlatformSpec
from app.models.result_models import PerformanceMetrics
from app.utils.reference_data import (
    DATA_VOLUME_PROFILES,
    TIER_PROFILES,
    round_half_up,
)

BASE_RESPONSE_TIME_MS = 50
MIN_RESPONSE_TIME_MS = 20
HIGH_COMPLEXITY_PENALTY_MS = 30
INTEGRATION_LATENCY_WEIGHT = 0.1

BASE_ERROR_RATE = 0.001
INTEGRATION_ERROR_WEIGHT = 0.1
HIGH_COMPLEXITY_ERROR_RATE = 0.002
MAX_ERROR_RATE = 0.1

BASE_CPU = 20
MAX_CPU = 95
BASE_MEMORY = 30
MAX_MEMORY = 90

BASE_DB_CONNECTIONS = 50
DB_CONNECTIONS_PER_DATA_FEATURE = 10

CDN_CACHE_HIT_RATE = 85
DEFAULT_CACHE_HIT_RATE = 60


class PerformanceSimulator:
    """Estimates latency, throughput and utilization for a platform spec."""

    def simulate(self, spec: PlatformSpec) -> PerformanceMetrics:
        """
        Compute performance metrics for the given spec.

        Args:
            spec: Platform description

        Returns:
            PerformanceMetrics with integer latencies and utilizations
        """
        tier = TIER_PROFILES[spec.infrastructure.tier]
        volume = DATA_VOLUME_PROFILES[spec.dataVolume]

        high_complexity = self._count_high_complexity(spec)
        total_requests = sum(f.expectedRequestsPerMinute for f in spec.features)
        integration_latency = sum(
            i.latencyMs * INTEGRATION_LATENCY_WEIGHT for i in spec.integrations
        )

        avg_response = self.base_response_time(spec) + integration_latency
        cpu = min(MAX_CPU, BASE_CPU + (total_requests / 100) * 0.5 + high_complexity * 10)
        memory = min(MAX_MEMORY, BASE_MEMORY + volume.memoryBonus)

        return PerformanceMetrics(
            averageResponseTime=round_half_up(avg_response),
            p50ResponseTime=round_half_up(avg_response * 0.8),
            p95ResponseTime=round_half_up(avg_response * 2.5),
            p99ResponseTime=round_half_up(avg_response * 4),
            throughput=round_half_up(total_requests * tier.throughputMultiplier),
            errorRate=self.error_rate(spec),
            cpuUtilization=round_half_up(cpu),
            memoryUtilization=round_half_up(memory),
            networkBandwidth=self.network_bandwidth(spec),
            databaseConnections=self.database_connections(spec),
            cacheHitRate=(
                CDN_CACHE_HIT_RATE
                if spec.infrastructure.cdnEnabled
                else DEFAULT_CACHE_HIT_RATE
            ),
        )

    def base_response_time(self, spec: PlatformSpec) -> float:
        """Server-side response time before integration latency, in ms."""
        tier = TIER_PROFILES[spec.infrastructure.tier]
        volume = DATA_VOLUME_PROFILES[spec.dataVolume]
        base = (
            BASE_RESPONSE_TIME_MS
            + self._count_high_complexity(spec) * HIGH_COMPLEXITY_PENALTY_MS
            + volume.responseTimePenaltyMs
            + tier.responseTimeBonusMs
        )
        return max(MIN_RESPONSE_TIME_MS, base)

    def error_rate(self, spec: PlatformSpec) -> float:
        rate = BASE_ERROR_RATE
        rate += sum(i.failureRate * INTEGRATION_ERROR_WEIGHT for i in spec.integrations)
        rate += self._count_high_complexity(spec) * HIGH_COMPLEXITY_ERROR_RATE
        return min(MAX_ERROR_RATE, rate)

    def network_bandwidth(self, spec: PlatformSpec) -> int:
        base = sum(f.expectedRequestsPerMinute * 0.01 for f in spec.features)
        # flat allowance for file transfer
        if any(f.type == FeatureType.FILE_PROCESSING for f in spec.features):
            base += 50
        return round_half_up(base)

    def database_connections(self, spec: PlatformSpec) -> int:
        tier_cap = TIER_PROFILES[spec.infrastructure.tier].maxDatabaseConnections
        data_intensive = sum(1 for f in spec.features if f.dataIntensive)
        return min(tier_cap, BASE_DB_CONNECTIONS + data_intensive * DB_CONNECTIONS_PER_DATA_FEATURE)

    @staticmethod
    def _count_high_complexity(spec: PlatformSpec) -> int:
        return sum(1 for f in spec.features if f.complexity == Complexity.HIGH)
