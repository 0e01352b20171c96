"""Models for simulation outputs."""

from typing import List, Optional
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from app.models.simulation_models import PlatformSpec, SimulationType


class SimulationStatus(str, Enum):
    """Readiness bucket of a finished simulation."""
    COMPLETED = "completed"
    WARNING = "warning"
    FAILED = "failed"

class Severity(str, Enum):
    """Severity of a bottleneck or failure point."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class Priority(str, Enum):
    """Priority of a recommendation."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class Effort(str, Enum):
    """Effort needed to apply a recommendation."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class BottleneckType(str, Enum):
    """Resource a bottleneck limits."""
    CPU = "cpu"
    MEMORY = "memory"
    NETWORK = "network"
    DATABASE = "database"
    EXTERNAL_API = "external-api"
    DISK = "disk"

class FailureType(str, Enum):
    """How a failure point manifests."""
    TIMEOUT = "timeout"
    OVERLOAD = "overload"
    CASCADE = "cascade"
    RESOURCE_EXHAUSTION = "resource-exhaustion"
    INTEGRATION_FAILURE = "integration-failure"

class CascadeImpact(str, Enum):
    """Blast radius of a cascade failure."""
    PARTIAL = "partial"
    MAJOR = "major"
    COMPLETE = "complete"

class RecommendationCategory(str, Enum):
    """Area a recommendation applies to."""
    ARCHITECTURE = "architecture"
    INFRASTRUCTURE = "infrastructure"
    CODE = "code"
    DATABASE = "database"
    CACHING = "caching"
    SECURITY = "security"


class PerformanceMetrics(BaseModel):
    """Steady-state latency, throughput and resource estimates."""
    averageResponseTime: int = Field(ge=0)
    p50ResponseTime: int = Field(ge=0)
    p95ResponseTime: int = Field(ge=0)
    p99ResponseTime: int = Field(ge=0)
    throughput: int = Field(ge=0)
    errorRate: float = Field(ge=0, le=1)
    cpuUtilization: int = Field(ge=0, le=100)
    memoryUtilization: int = Field(ge=0, le=100)
    networkBandwidth: int = Field(ge=0)
    databaseConnections: int = Field(ge=0)
    cacheHitRate: int = Field(ge=0, le=100)

    class Config:
        frozen = True

class Bottleneck(BaseModel):
    """A component predicted to limit capacity before the breaking point."""
    component: str
    type: BottleneckType
    severity: Severity
    threshold: float
    current: float
    recommendation: str

    class Config:
        frozen = True

class ResponseTimePoint(BaseModel):
    """Response time sampled at a given concurrency."""
    users: int
    responseTime: int

    class Config:
        frozen = True

class ThroughputPoint(BaseModel):
    """Throughput sampled at a given concurrency."""
    users: int
    throughput: int

    class Config:
        frozen = True

class LoadTestResult(BaseModel):
    """Capacity figures and load curves."""
    maxConcurrentUsers: int = Field(ge=0)
    sustainedLoad: int = Field(ge=0)
    degradationPoint: int = Field(ge=0)
    responseTimeCurve: List[ResponseTimePoint] = []
    throughputCurve: List[ThroughputPoint] = []
    bottlenecks: List[Bottleneck] = []

    class Config:
        frozen = True

class CascadeFailure(BaseModel):
    """An overload predicted to propagate into dependent components."""
    trigger: str
    affectedComponents: List[str]
    propagationTime: int
    impact: CascadeImpact

    class Config:
        frozen = True

class ResourceExhaustion(BaseModel):
    """A resource predicted to run out at a given load."""
    resource: str
    exhaustionPoint: float
    recoveryStrategy: str

    class Config:
        frozen = True

class StressTestResult(BaseModel):
    """Breaking point and failure behaviour beyond capacity."""
    breakingPoint: int = Field(ge=0)
    recoveryTime: int = Field(ge=0)
    gracefulDegradation: bool
    cascadeFailures: List[CascadeFailure] = []
    resourceExhaustion: List[ResourceExhaustion] = []

    class Config:
        frozen = True

class FailurePoint(BaseModel):
    """A discrete, probability and severity annotated risk."""
    id: str
    component: str
    failureType: FailureType
    probability: float = Field(ge=0, le=1)
    severity: Severity
    triggerCondition: str
    mitigation: str
    estimatedDowntime: int = Field(ge=0, description="Expected downtime in seconds")

    class Config:
        frozen = True

class Recommendation(BaseModel):
    """A prioritized mitigation."""
    id: str
    category: RecommendationCategory
    priority: Priority
    title: str
    description: str
    impact: str
    effort: Effort
    costReduction: Optional[float] = None
    performanceGain: Optional[float] = None

    class Config:
        frozen = True


class SimulationResult(BaseModel):
    """Full outcome of one simulation run."""
    id: str
    platformSpec: PlatformSpec
    simulationType: SimulationType
    startedAt: datetime
    completedAt: datetime
    duration: int = Field(ge=0, description="Run duration in milliseconds")
    status: SimulationStatus
    performanceMetrics: Optional[PerformanceMetrics] = None
    loadTestResults: Optional[LoadTestResult] = None
    stressTestResults: Optional[StressTestResult] = None
    failurePoints: List[FailurePoint] = []
    recommendations: List[Recommendation] = []
    overallScore: int = Field(ge=0, le=100)
    error: Optional[str] = None

    class Config:
        """Results are immutable once produced."""
        frozen = True


class SimulationListResponse(BaseModel):
    """Stored simulations, newest first."""
    items: List[SimulationResult]
    count: int
