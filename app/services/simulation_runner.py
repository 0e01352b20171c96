"""
Pre-build simulation runner.

Implementation:
- SimulationRunner: runs the full pipeline and publishes the result
- Simulators, detector, recommender and scorer injected via the constructor
- Result storage behind ISimulationStore so it can be swapped out
- Internal pipeline errors become a failed result instead of an exception
"""

import logging
import time
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple, Union

from app.models.reference_models import (
    FeatureTypeInfo,
    InfrastructureCatalogue,
    IntegrationTypeInfo,
    SectorPreset,
)
from app.models.result_models import SimulationResult, SimulationStatus
from app.models.simulation_models import (
    InfrastructureTier,
    PlatformSpec,
    QuickEstimateRequest,
    QuickEstimateResponse,
    Sector,
    SimulationType,
    coerce_enum,
)
from app.services.failure_point_detector import FailurePointDetector
from app.services.load_test_simulator import LoadTestSimulator
from app.services.performance_simulator import PerformanceSimulator
from app.services.recommendation_engine import RecommendationEngine
from app.services.score_aggregator import ScoreAggregator
from app.services.simulation_interfaces import ISimulationStore, SimulationContext
from app.services.simulation_store import InMemorySimulationStore
from app.services.stress_test_simulator import StressTestSimulator
from app.services.validation import validate_platform_spec
from app.utils.reference_data import (
    DATA_VOLUME_PROFILES,
    FEATURE_TYPES,
    INTEGRATION_TYPES,
    SECTOR_PRESETS,
    SECURITY_LEVELS,
    TIER_PROFILES,
    round_half_up,
)

logger = logging.getLogger(__name__)

QUICK_ESTIMATE_BASE_SCORE = 85
QUICK_ESTIMATE_HEADROOM = 1.5

# (predicate, penalty, warning) evaluated in order by quick_estimate
QuickEstimateRule = Tuple[Callable[[QuickEstimateRequest, float], bool], int, str]

QUICK_ESTIMATE_RULES: List[QuickEstimateRule] = [
    (
        lambda req, max_users: req.expectedUsers > max_users * 0.8,
        20,
        "Expected users approaching capacity limit",
    ),
    (
        lambda req, _: req.featureCount > 10,
        10,
        "High feature count may impact performance",
    ),
    (
        lambda req, _: req.sector == Sector.FINANCIAL and req.tier == InfrastructureTier.STARTER,
        30,
        "Financial sector requires higher infrastructure tier",
    ),
    (
        lambda req, _: req.integrationCount > 5,
        5,
        "Multiple integrations increase failure risk",
    ),
]


class SimulationRunner:
    """
    Orchestrates the simulation pipeline.

    Responsibilities:
    - Validate the spec before anything runs
    - Run performance, load and stress simulation, then detection,
      recommendations and scoring, strictly in that order
    - Timestamp, id and publish each result exactly once
    - Serve lookups, quick estimates and the reference catalogues
    """

    def __init__(
        self,
        store: Optional[ISimulationStore] = None,
        performance_simulator: Optional[PerformanceSimulator] = None,
        load_simulator: Optional[LoadTestSimulator] = None,
        stress_simulator: Optional[StressTestSimulator] = None,
        detector: Optional[FailurePointDetector] = None,
        recommender: Optional[RecommendationEngine] = None,
        aggregator: Optional[ScoreAggregator] = None,
    ):
        self.store = store if store is not None else InMemorySimulationStore()
        self.performance_simulator = performance_simulator or PerformanceSimulator()
        self.load_simulator = load_simulator or LoadTestSimulator()
        self.stress_simulator = stress_simulator or StressTestSimulator()
        self.detector = detector or FailurePointDetector()
        self.recommender = recommender or RecommendationEngine()
        self.aggregator = aggregator or ScoreAggregator()

    def run(
        self,
        spec: PlatformSpec,
        simulation_type: Union[SimulationType, str] = SimulationType.COMPREHENSIVE,
    ) -> SimulationResult:
        """
        Run every simulation stage for a spec and store the result.

        Args:
            spec: Platform description
            simulation_type: Recorded on the result; all stages always run.
                Plain strings are accepted and unknown values run as comprehensive

        Returns:
            The stored SimulationResult

        Raises:
            SimulationValidationError: If the spec is rejected up front
        """
        simulation_type = coerce_enum(
            SimulationType, simulation_type, SimulationType.COMPREHENSIVE
        )
        validate_platform_spec(spec)

        simulation_id = f"sim-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
        started_at = datetime.now(timezone.utc)
        start = time.perf_counter()
        spec_copy = spec.model_copy(deep=True)

        logger.info(
            "Starting %s simulation %s for %s", simulation_type.value, simulation_id, spec.name
        )

        try:
            performance = self.performance_simulator.simulate(spec)
            load = self.load_simulator.simulate(spec)
            stress = self.stress_simulator.simulate(spec)

            ctx = SimulationContext(
                spec=spec, performance=performance, load=load, stress=stress
            )
            failure_points = self.detector.detect(ctx)
            recommendations = self.recommender.recommend(
                replace(ctx, failure_points=failure_points)
            )
            overall_score = self.aggregator.score(performance, load, stress, failure_points)

            result = SimulationResult(
                id=simulation_id,
                platformSpec=spec_copy,
                simulationType=simulation_type,
                startedAt=started_at,
                completedAt=datetime.now(timezone.utc),
                duration=int((time.perf_counter() - start) * 1000),
                status=self.aggregator.status_for(overall_score),
                performanceMetrics=performance,
                loadTestResults=load,
                stressTestResults=stress,
                failurePoints=failure_points,
                recommendations=recommendations,
                overallScore=overall_score,
            )
        except Exception as e:
            logger.error("Simulation %s failed: %s", simulation_id, e, exc_info=True)
            result = SimulationResult(
                id=simulation_id,
                platformSpec=spec_copy,
                simulationType=simulation_type,
                startedAt=started_at,
                completedAt=datetime.now(timezone.utc),
                duration=int((time.perf_counter() - start) * 1000),
                status=SimulationStatus.FAILED,
                overallScore=0,
                error=f"Simulation failed: {e}",
            )

        self.store.add(result)
        logger.info(
            "Completed simulation %s with score %d (%s)",
            simulation_id,
            result.overallScore,
            result.status.value,
        )
        return result

    def quick_estimate(self, request: QuickEstimateRequest) -> QuickEstimateResponse:
        """
        Cheap estimate that skips the full pipeline and stores nothing.

        Uses the same tier capacities as the load model with a flat headroom
        factor instead of the scaling and redundancy multipliers.
        """
        capacity = TIER_PROFILES[request.tier].capacity
        headroom = 1 if request.tier == InfrastructureTier.DEDICATED else QUICK_ESTIMATE_HEADROOM
        max_users = capacity * headroom

        response_time = 50 + request.featureCount * 10 + request.integrationCount * 20

        score = QUICK_ESTIMATE_BASE_SCORE
        warnings: List[str] = []
        for applies, penalty, warning in QUICK_ESTIMATE_RULES:
            if applies(request, max_users):
                score -= penalty
                warnings.append(warning)

        return QuickEstimateResponse(
            score=max(0, score),
            maxUsers=round_half_up(max_users),
            responseTime=round_half_up(response_time),
            warnings=warnings,
        )

    def get_by_id(self, simulation_id: str) -> Optional[SimulationResult]:
        return self.store.get(simulation_id)

    def get_all(self) -> List[SimulationResult]:
        return self.store.list_all()

    @staticmethod
    def get_sector_presets() -> List[SectorPreset]:
        return list(SECTOR_PRESETS.values())

    @staticmethod
    def get_feature_types() -> List[FeatureTypeInfo]:
        return list(FEATURE_TYPES.values())

    @staticmethod
    def get_integration_types() -> List[IntegrationTypeInfo]:
        return list(INTEGRATION_TYPES.values())

    @staticmethod
    def get_infrastructure_catalogue() -> InfrastructureCatalogue:
        return InfrastructureCatalogue(
            tiers=list(TIER_PROFILES.values()),
            dataVolumes=list(DATA_VOLUME_PROFILES.values()),
            securityLevels=list(SECURITY_LEVELS.values()),
        )


# Factory function for easy instantiation
def create_simulation_runner(store: Optional[ISimulationStore] = None) -> SimulationRunner:
    """
    Create a runner wired with the default pipeline stages.

    Pass a store to share results across runners or substitute a backend.
    """
    return SimulationRunner(store=store if store is not None else InMemorySimulationStore())


simulation_runner = create_simulation_runner()
