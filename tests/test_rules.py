"""
Tests for failure detection, recommendations and scoring.

Tests cover:
1. Failure point thresholds, severities and emission order
2. Recommendation triggers and priority ordering
3. Score penalties, clamping and status buckets
"""

import pytest
from pydantic import ValidationError

from app.models.result_models import (
    Bottleneck,
    BottleneckType,
    CascadeFailure,
    CascadeImpact,
    FailurePoint,
    FailureType,
    LoadTestResult,
    PerformanceMetrics,
    Priority,
    ResourceExhaustion,
    Severity,
    SimulationStatus,
    StressTestResult,
)
from app.services.failure_point_detector import FailurePointDetector, FailureRule
from app.services.recommendation_engine import (
    DEFAULT_RECOMMENDATION_RULES,
    PRIORITY_ORDER,
    RecommendationEngine,
)
from app.services.score_aggregator import ScoreAggregator
from app.services.simulation_interfaces import SimulationContext


def _metrics(**overrides) -> PerformanceMetrics:
    values = dict(
        averageResponseTime=100,
        p50ResponseTime=80,
        p95ResponseTime=250,
        p99ResponseTime=400,
        throughput=1000,
        errorRate=0.001,
        cpuUtilization=30,
        memoryUtilization=40,
        networkBandwidth=10,
        databaseConnections=50,
        cacheHitRate=85,
    )
    values.update(overrides)
    return PerformanceMetrics(**values)


def _load(bottlenecks=None) -> LoadTestResult:
    return LoadTestResult(
        maxConcurrentUsers=500,
        sustainedLoad=350,
        degradationPoint=425,
        bottlenecks=bottlenecks or [],
    )


def _stress(graceful=True, cascades=None, exhaustion=None) -> StressTestResult:
    return StressTestResult(
        breakingPoint=750,
        recoveryTime=120000,
        gracefulDegradation=graceful,
        cascadeFailures=cascades or [],
        resourceExhaustion=exhaustion or [],
    )


CASCADE = CascadeFailure(
    trigger="Authentication service overload",
    affectedComponents=["API Gateway"],
    propagationTime=5000,
    impact=CascadeImpact.MAJOR,
)


def _bottleneck(severity, kind=BottleneckType.DATABASE) -> Bottleneck:
    return Bottleneck(
        component="X", type=kind, severity=severity, threshold=80, current=65, recommendation="r"
    )


def _failure(severity) -> FailurePoint:
    return FailurePoint(
        id="fp-x",
        component="X",
        failureType=FailureType.OVERLOAD,
        probability=0.5,
        severity=severity,
        triggerCondition="t",
        mitigation="m",
        estimatedDowntime=0,
    )


class TestFailurePointDetector:
    """Test failure rules and their ordering."""

    def test_nothing_detected_for_healthy_metrics(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(), performance=_metrics(), load=_load(), stress=_stress()
        )
        assert FailurePointDetector().detect(ctx) == []

    @pytest.mark.parametrize(
        "cpu, severity, probability",
        [(71, Severity.HIGH, 1 / 30), (85, Severity.HIGH, 0.5), (86, Severity.CRITICAL, 16 / 30)],
    )
    def test_cpu_overload(self, make_spec, cpu, severity, probability):
        ctx = SimulationContext(
            spec=make_spec(),
            performance=_metrics(cpuUtilization=cpu),
            load=_load(),
            stress=_stress(),
        )

        points = FailurePointDetector().detect(ctx)

        assert len(points) == 1
        assert points[0].failureType == FailureType.OVERLOAD
        assert points[0].severity == severity
        assert points[0].probability == pytest.approx(probability)
        assert points[0].estimatedDowntime == 300

    def test_cpu_at_threshold_is_not_overload(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(),
            performance=_metrics(cpuUtilization=70),
            load=_load(),
            stress=_stress(),
        )
        assert FailurePointDetector().detect(ctx) == []

    def test_p99_timeout(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(),
            performance=_metrics(p99ResponseTime=1600),
            load=_load(),
            stress=_stress(),
        )

        [point] = FailurePointDetector().detect(ctx)

        assert point.failureType == FailureType.TIMEOUT
        assert point.severity == Severity.MEDIUM
        assert point.probability == pytest.approx(0.5)
        assert point.estimatedDowntime == 0
        assert point.triggerCondition == "P99 response time reaches 1600ms"

    def test_p99_timeout_probability_is_clamped(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(),
            performance=_metrics(p99ResponseTime=9000),
            load=_load(),
            stress=_stress(),
        )

        [point] = FailurePointDetector().detect(ctx)

        assert point.severity == Severity.CRITICAL
        assert point.probability == 1.0

    def test_integration_failures(self, make_spec):
        """One point per flaky integration; payment and auth are critical."""
        integrations = [
            {"id": "pay", "name": "Stripe", "type": "payment", "failureRate": 0.02},
            {"id": "sso", "name": "SSO", "type": "auth", "failureRate": 0.03},
            {"id": "mail", "name": "Mailer", "type": "notification", "failureRate": 0.05},
            {"id": "ok", "name": "Stable", "type": "api", "failureRate": 0.01},
        ]
        ctx = SimulationContext(
            spec=make_spec(integrations=integrations),
            performance=_metrics(),
            load=_load(),
            stress=_stress(),
        )

        points = FailurePointDetector().detect(ctx)

        assert [p.id for p in points] == [
            "fp-integration-pay",
            "fp-integration-sso",
            "fp-integration-mail",
        ]
        assert [p.severity for p in points] == [
            Severity.CRITICAL,
            Severity.CRITICAL,
            Severity.MEDIUM,
        ]
        assert points[0].probability == pytest.approx(0.02)
        assert points[0].component == "Integration: Stripe"
        assert points[0].triggerCondition == "Stripe failure rate at 2.0%"
        assert all(p.estimatedDowntime == 60 for p in points)

    def test_integration_ids_never_clash_with_fixed_points(self, make_spec):
        """Integrations named like built-in points still get distinct ids."""
        integrations = [
            {"id": name, "name": name, "type": "api", "failureRate": 0.5}
            for name in ("cpu", "timeout", "cascade")
        ]
        ctx = SimulationContext(
            spec=make_spec(integrations=integrations),
            performance=_metrics(cpuUtilization=90, p99ResponseTime=2000),
            load=_load(),
            stress=_stress(cascades=[CASCADE]),
        )

        ids = [p.id for p in FailurePointDetector().detect(ctx)]

        assert len(ids) == 6
        assert len(set(ids)) == len(ids)

    def test_emission_follows_rule_order(self, make_spec):
        integrations = [{"id": "pay", "name": "Stripe", "type": "payment", "failureRate": 0.5}]
        ctx = SimulationContext(
            spec=make_spec(integrations=integrations),
            performance=_metrics(cpuUtilization=90, p99ResponseTime=2000),
            load=_load(),
            stress=_stress(cascades=[CASCADE]),
        )

        points = FailurePointDetector().detect(ctx)

        assert [p.failureType for p in points] == [
            FailureType.OVERLOAD,
            FailureType.TIMEOUT,
            FailureType.INTEGRATION_FAILURE,
            FailureType.CASCADE,
        ]
        assert points[-1].probability == pytest.approx(0.15)
        assert points[-1].estimatedDowntime == 600

    def test_custom_rules_are_pluggable(self, make_spec):
        rule = FailureRule(
            name="always",
            applies=lambda ctx: True,
            emit=lambda ctx: [_failure(Severity.LOW)],
        )
        ctx = SimulationContext(
            spec=make_spec(), performance=_metrics(), load=_load(), stress=_stress()
        )
        assert len(FailurePointDetector(rules=[rule]).detect(ctx)) == 1


class TestRecommendationEngine:
    """Test recommendation rules and ordering."""

    def test_no_recommendations_for_healthy_platform(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(), performance=_metrics(), load=_load(), stress=_stress()
        )
        assert RecommendationEngine().recommend(ctx) == []

    def test_every_rule_fires_and_critical_comes_first(self, make_spec):
        spec = make_spec(
            sector="financial",
            securityLevel="military",
            expectedUsers=5000,
            infrastructure={"tier": "starter"},
        )
        cascade_point = _failure(Severity.CRITICAL).model_copy(
            update={"failureType": FailureType.CASCADE}
        )
        ctx = SimulationContext(
            spec=spec,
            performance=_metrics(cacheHitRate=60),
            load=_load([_bottleneck(Severity.MEDIUM)]),
            stress=_stress(cascades=[CASCADE]),
            failure_points=[cascade_point],
        )

        recs = RecommendationEngine().recommend(ctx)

        assert [r.id for r in recs] == [
            "rec-scaling",
            "rec-tier",
            "rec-arch",
            "rec-security",
            "rec-cache",
            "rec-db",
        ]
        ranks = [PRIORITY_ORDER[r.priority] for r in recs]
        assert ranks == sorted(ranks)

    def test_auto_scaling_threshold(self, make_spec):
        ctx_at = SimulationContext(
            spec=make_spec(expectedUsers=1000),
            performance=_metrics(),
            load=_load(),
            stress=_stress(),
        )
        ctx_over = SimulationContext(
            spec=make_spec(expectedUsers=1001),
            performance=_metrics(),
            load=_load(),
            stress=_stress(),
        )

        assert RecommendationEngine().recommend(ctx_at) == []
        [rec] = RecommendationEngine().recommend(ctx_over)
        assert rec.priority == Priority.CRITICAL
        assert rec.title == "Enable Auto-Scaling"

    def test_military_with_redundancy_needs_no_geo_redundancy(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(securityLevel="military", infrastructure={"redundancy": True}),
            performance=_metrics(),
            load=_load(),
            stress=_stress(),
        )
        assert RecommendationEngine().recommend(ctx) == []

    def test_cpu_bottleneck_does_not_trigger_database_advice(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(),
            performance=_metrics(),
            load=_load([_bottleneck(Severity.HIGH, BottleneckType.CPU)]),
            stress=_stress(),
        )
        assert RecommendationEngine().recommend(ctx) == []

    def test_recommendations_are_frozen_copies(self, make_spec):
        ctx = SimulationContext(
            spec=make_spec(),
            performance=_metrics(cacheHitRate=60),
            load=_load(),
            stress=_stress(),
        )
        [rec] = RecommendationEngine().recommend(ctx)

        assert rec is not DEFAULT_RECOMMENDATION_RULES[0].recommendation
        with pytest.raises(ValidationError):
            rec.title = "changed"
        assert DEFAULT_RECOMMENDATION_RULES[0].recommendation.title == "Improve Caching Strategy"


class TestScoreAggregator:
    """Test readiness scoring."""

    def test_perfect_score(self):
        assert ScoreAggregator().score(_metrics(), _load(), _stress(), []) == 100

    def test_response_time_penalties_stack(self):
        aggregator = ScoreAggregator()
        assert aggregator.score(_metrics(averageResponseTime=600), _load(), _stress(), []) == 90
        assert aggregator.score(_metrics(averageResponseTime=1200), _load(), _stress(), []) == 75

    def test_error_rate_penalties_stack(self):
        aggregator = ScoreAggregator()
        assert aggregator.score(_metrics(errorRate=0.02), _load(), _stress(), []) == 85
        assert aggregator.score(_metrics(errorRate=0.06), _load(), _stress(), []) == 65

    def test_resource_penalties(self):
        metrics = _metrics(p99ResponseTime=2500, cpuUtilization=81, memoryUtilization=86)
        assert ScoreAggregator().score(metrics, _load(), _stress(), []) == 70

    def test_bottleneck_penalties(self):
        load = _load(
            [_bottleneck(Severity.CRITICAL), _bottleneck(Severity.HIGH), _bottleneck(Severity.LOW)]
        )
        assert ScoreAggregator().score(_metrics(), load, _stress(), []) == 83

    def test_stress_penalties(self):
        exhaustion = [
            ResourceExhaustion(resource="Memory", exhaustionPoint=450, recoveryStrategy="s")
        ]
        stress = _stress(graceful=False, cascades=[CASCADE], exhaustion=exhaustion)
        assert ScoreAggregator().score(_metrics(), _load(), stress, []) == 65

    def test_failure_point_penalties(self):
        failures = [
            _failure(Severity.CRITICAL),
            _failure(Severity.HIGH),
            _failure(Severity.MEDIUM),
            _failure(Severity.LOW),
        ]
        assert ScoreAggregator().score(_metrics(), _load(), _stress(), failures) == 73

    def test_score_floors_at_zero(self):
        failures = [_failure(Severity.CRITICAL)] * 10
        assert ScoreAggregator().score(_metrics(), _load(), _stress(), failures) == 0

    @pytest.mark.parametrize(
        "score, status",
        [
            (100, SimulationStatus.COMPLETED),
            (70, SimulationStatus.COMPLETED),
            (69, SimulationStatus.WARNING),
            (50, SimulationStatus.WARNING),
            (49, SimulationStatus.FAILED),
            (0, SimulationStatus.FAILED),
        ],
    )
    def test_status_buckets(self, score, status):
        assert ScoreAggregator.status_for(score) == status
