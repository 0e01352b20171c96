"""
Rule-based mitigation recommendations.

Each rule pairs a predicate over the simulation context with the
recommendation it produces. Rules are evaluated in a fixed order and the
resulting list is stable-sorted by priority (critical first).
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from app.models.simulation_models import InfrastructureTier, Sector, SecurityLevel
from app.models.result_models import (
    BottleneckType,
    Effort,
    FailureType,
    Priority,
    Recommendation,
    RecommendationCategory,
)
from app.services.simulation_interfaces import SimulationContext

PRIORITY_ORDER = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}

MIN_CACHE_HIT_RATE = 70
STATIC_CAPACITY_USER_LIMIT = 1000


@dataclass(frozen=True)
class RecommendationRule:
    """A predicate and the recommendation it yields when it holds."""

    name: str
    applies: Callable[[SimulationContext], bool]
    recommendation: Recommendation


DEFAULT_RECOMMENDATION_RULES: List[RecommendationRule] = [
    RecommendationRule(
        name="caching",
        applies=lambda ctx: ctx.performance.cacheHitRate < MIN_CACHE_HIT_RATE,
        recommendation=Recommendation(
            id="rec-cache",
            category=RecommendationCategory.CACHING,
            priority=Priority.HIGH,
            title="Improve Caching Strategy",
            description=(
                "Current cache hit rate is below optimal. "
                "Implement multi-layer caching with Redis and CDN."
            ),
            impact="Reduce response time by 40-60%",
            effort=Effort.MEDIUM,
            performanceGain=50,
        ),
    ),
    RecommendationRule(
        name="auto-scaling",
        applies=lambda ctx: (
            not ctx.spec.infrastructure.autoScaling
            and ctx.spec.expectedUsers > STATIC_CAPACITY_USER_LIMIT
        ),
        recommendation=Recommendation(
            id="rec-scaling",
            category=RecommendationCategory.INFRASTRUCTURE,
            priority=Priority.CRITICAL,
            title="Enable Auto-Scaling",
            description=(
                "Expected user load exceeds static infrastructure capacity. "
                "Enable auto-scaling."
            ),
            impact="Handle 300% more traffic without degradation",
            effort=Effort.LOW,
            performanceGain=200,
        ),
    ),
    RecommendationRule(
        name="tier-upgrade",
        applies=lambda ctx: (
            ctx.spec.infrastructure.tier == InfrastructureTier.STARTER
            and ctx.spec.sector == Sector.FINANCIAL
        ),
        recommendation=Recommendation(
            id="rec-tier",
            category=RecommendationCategory.INFRASTRUCTURE,
            priority=Priority.CRITICAL,
            title="Upgrade Infrastructure Tier",
            description="Financial sector requires enterprise-grade infrastructure for compliance.",
            impact="Meet compliance requirements and ensure reliability",
            effort=Effort.HIGH,
            costReduction=-50,
        ),
    ),
    RecommendationRule(
        name="database",
        applies=lambda ctx: any(
            b.type == BottleneckType.DATABASE for b in ctx.load.bottlenecks
        ),
        recommendation=Recommendation(
            id="rec-db",
            category=RecommendationCategory.DATABASE,
            priority=Priority.HIGH,
            title="Optimize Database Performance",
            description=(
                "Database is a bottleneck. Add read replicas, optimize queries, "
                "implement connection pooling."
            ),
            impact="Reduce database load by 60%",
            effort=Effort.MEDIUM,
            performanceGain=60,
        ),
    ),
    RecommendationRule(
        name="fault-isolation",
        applies=lambda ctx: any(
            f.failureType == FailureType.CASCADE for f in ctx.failure_points
        ),
        recommendation=Recommendation(
            id="rec-arch",
            category=RecommendationCategory.ARCHITECTURE,
            priority=Priority.CRITICAL,
            title="Implement Fault Isolation",
            description=(
                "Cascade failure risk detected. "
                "Implement bulkhead pattern and circuit breakers."
            ),
            impact="Prevent system-wide outages",
            effort=Effort.HIGH,
            performanceGain=30,
        ),
    ),
    RecommendationRule(
        name="geo-redundancy",
        applies=lambda ctx: (
            ctx.spec.securityLevel == SecurityLevel.MILITARY
            and not ctx.spec.infrastructure.redundancy
        ),
        recommendation=Recommendation(
            id="rec-security",
            category=RecommendationCategory.SECURITY,
            priority=Priority.CRITICAL,
            title="Enable Geographic Redundancy",
            description="Military-grade security requires geographic redundancy for disaster recovery.",
            impact="Ensure 99.99% availability",
            effort=Effort.HIGH,
            costReduction=-100,
        ),
    ),
]


class RecommendationEngine:
    """Builds the priority-sorted mitigation list for a simulation."""

    def __init__(self, rules: Optional[Sequence[RecommendationRule]] = None):
        self.rules = (
            list(rules) if rules is not None else list(DEFAULT_RECOMMENDATION_RULES)
        )

    def recommend(self, ctx: SimulationContext) -> List[Recommendation]:
        """
        Evaluate every rule against the context.

        Args:
            ctx: Spec plus performance, load, stress and failure outputs

        Returns:
            Recommendations ordered critical > high > medium > low; ties keep
            rule order
        """
        matched = [
            rule.recommendation.model_copy() for rule in self.rules if rule.applies(ctx)
        ]
        return sorted(matched, key=lambda rec: PRIORITY_ORDER[rec.priority])
