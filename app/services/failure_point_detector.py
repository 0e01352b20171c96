"""
Failure point detection.

Turns the performance, load and stress outputs into discrete, severity
ranked failure points. Detection is an ordered list of declarative rules;
points are emitted in rule order and never re-sorted.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from app.models.result_models import FailurePoint, FailureType, Severity
from app.services.simulation_interfaces import SimulationContext
from app.utils.reference_data import CRITICAL_INTEGRATION_TYPES

CPU_OVERLOAD_THRESHOLD = 70
CPU_CRITICAL_THRESHOLD = 85
P99_TIMEOUT_THRESHOLD_MS = 1000
P99_CRITICAL_THRESHOLD_MS = 3000
INTEGRATION_FAILURE_THRESHOLD = 0.01
CASCADE_PROBABILITY = 0.15


@dataclass(frozen=True)
class FailureRule:
    """A named detection rule: when applies() holds, emit() yields points."""

    name: str
    applies: Callable[[SimulationContext], bool]
    emit: Callable[[SimulationContext], List[FailurePoint]]


def _clamp_probability(value: float) -> float:
    return max(0.0, min(1.0, value))


def _cpu_overload(ctx: SimulationContext) -> List[FailurePoint]:
    cpu = ctx.performance.cpuUtilization
    return [
        FailurePoint(
            id="fp-cpu",
            component="CPU Resources",
            failureType=FailureType.OVERLOAD,
            probability=_clamp_probability((cpu - CPU_OVERLOAD_THRESHOLD) / 30),
            severity=Severity.CRITICAL if cpu > CPU_CRITICAL_THRESHOLD else Severity.HIGH,
            triggerCondition=f"CPU utilization exceeds {cpu}%",
            mitigation="Implement horizontal scaling and optimize compute-heavy operations",
            estimatedDowntime=300,
        )
    ]


def _p99_timeout(ctx: SimulationContext) -> List[FailurePoint]:
    p99 = ctx.performance.p99ResponseTime
    return [
        FailurePoint(
            id="fp-timeout",
            component="Request Processing",
            failureType=FailureType.TIMEOUT,
            probability=_clamp_probability(0.3 + (p99 - P99_TIMEOUT_THRESHOLD_MS) / 3000),
            severity=Severity.CRITICAL if p99 > P99_CRITICAL_THRESHOLD_MS else Severity.MEDIUM,
            triggerCondition=f"P99 response time reaches {p99}ms",
            mitigation="Implement caching, optimize database queries, add CDN",
            estimatedDowntime=0,
        )
    ]


def _integration_failures(ctx: SimulationContext) -> List[FailurePoint]:
    points = []
    for integration in ctx.spec.integrations:
        if integration.failureRate <= INTEGRATION_FAILURE_THRESHOLD:
            continue
        points.append(
            FailurePoint(
                id=f"fp-integration-{integration.id}",
                component=f"Integration: {integration.name}",
                failureType=FailureType.INTEGRATION_FAILURE,
                probability=integration.failureRate,
                severity=(
                    Severity.CRITICAL
                    if integration.type in CRITICAL_INTEGRATION_TYPES
                    else Severity.MEDIUM
                ),
                triggerCondition=(
                    f"{integration.name} failure rate at {integration.failureRate * 100:.1f}%"
                ),
                mitigation="Implement circuit breaker pattern and fallback mechanisms",
                estimatedDowntime=60,
            )
        )
    return points


def _cascade(ctx: SimulationContext) -> List[FailurePoint]:
    return [
        FailurePoint(
            id="fp-cascade",
            component="System Architecture",
            failureType=FailureType.CASCADE,
            probability=CASCADE_PROBABILITY,
            severity=Severity.CRITICAL,
            triggerCondition="Multiple component failures in sequence",
            mitigation="Implement bulkhead pattern and service isolation",
            estimatedDowntime=600,
        )
    ]


DEFAULT_FAILURE_RULES: List[FailureRule] = [
    FailureRule(
        name="cpu-overload",
        applies=lambda ctx: ctx.performance.cpuUtilization > CPU_OVERLOAD_THRESHOLD,
        emit=_cpu_overload,
    ),
    FailureRule(
        name="p99-timeout",
        applies=lambda ctx: ctx.performance.p99ResponseTime > P99_TIMEOUT_THRESHOLD_MS,
        emit=_p99_timeout,
    ),
    FailureRule(
        name="integration-failure",
        applies=lambda ctx: any(
            i.failureRate > INTEGRATION_FAILURE_THRESHOLD for i in ctx.spec.integrations
        ),
        emit=_integration_failures,
    ),
    FailureRule(
        name="cascade",
        applies=lambda ctx: len(ctx.stress.cascadeFailures) > 0,
        emit=_cascade,
    ),
]


class FailurePointDetector:
    """Evaluates failure rules in a fixed order."""

    def __init__(self, rules: Optional[Sequence[FailureRule]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_FAILURE_RULES)

    def detect(self, ctx: SimulationContext) -> List[FailurePoint]:
        failure_points: List[FailurePoint] = []
        for rule in self.rules:
            if rule.applies(ctx):
                failure_points.extend(rule.emit(ctx))
        return failure_points
