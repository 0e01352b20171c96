"""Models for the platform description submitted to the simulation engine."""

from typing import Any, List, Type, TypeVar
from enum import Enum

from pydantic import BaseModel, Field, field_validator

E = TypeVar("E", bound=Enum)


class Sector(str, Enum):
    """Business sector the platform serves."""
    FINANCIAL = "financial"
    HEALTHCARE = "healthcare"
    GOVERNMENT = "government"
    EDUCATION = "education"
    ENTERPRISE = "enterprise"
    ECOMMERCE = "ecommerce"
    SOCIAL = "social"

class FeatureType(str, Enum):
    """Workload category of a feature."""
    CRUD = "crud"
    REALTIME = "realtime"
    COMPUTATION = "computation"
    FILE_PROCESSING = "file-processing"
    AI_INFERENCE = "ai-inference"
    REPORTING = "reporting"

class Complexity(str, Enum):
    """Implementation complexity of a feature."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class IntegrationType(str, Enum):
    """Kind of external system an integration talks to."""
    API = "api"
    DATABASE = "database"
    QUEUE = "queue"
    STORAGE = "storage"
    AUTH = "auth"
    PAYMENT = "payment"
    NOTIFICATION = "notification"

class InfrastructureTier(str, Enum):
    """Infrastructure capacity class."""
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"
    DEDICATED = "dedicated"

class DataVolume(str, Enum):
    """Expected stored data volume."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    MASSIVE = "massive"

class SecurityLevel(str, Enum):
    """Required security posture."""
    STANDARD = "standard"
    ENHANCED = "enhanced"
    MILITARY = "military"

class SimulationType(str, Enum):
    """Requested simulation flavour. Recorded for display only."""
    PERFORMANCE = "performance"
    LOAD = "load"
    STRESS = "stress"
    FAILURE = "failure"
    COMPREHENSIVE = "comprehensive"


def coerce_enum(enum_cls: Type[E], value: Any, default: E) -> E:
    """
    Resolve a raw value to a member of enum_cls.

    Unknown or missing values fall back to default instead of failing
    validation, so every formula downstream stays total over its inputs.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            return default
    return default


class FeatureSpec(BaseModel):
    """A single planned feature of the platform."""
    id: str
    name: str
    type: FeatureType = FeatureType.CRUD
    complexity: Complexity = Complexity.MEDIUM
    expectedRequestsPerMinute: float = Field(default=0, ge=0, allow_inf_nan=False)
    dataIntensive: bool = False

    class Config:
        """Feature specs are value objects."""
        frozen = True

    @field_validator("type", mode="before")
    @classmethod
    def resolve_type(cls, v: Any) -> FeatureType:
        """Unknown feature types are treated as plain CRUD."""
        return coerce_enum(FeatureType, v, FeatureType.CRUD)

    @field_validator("complexity", mode="before")
    @classmethod
    def resolve_complexity(cls, v: Any) -> Complexity:
        """Unknown complexity is treated as medium."""
        return coerce_enum(Complexity, v, Complexity.MEDIUM)


class IntegrationSpec(BaseModel):
    """An external system the platform depends on."""
    id: str
    name: str
    type: IntegrationType = IntegrationType.API
    latencyMs: float = Field(default=0, ge=0, allow_inf_nan=False)
    failureRate: float = Field(default=0, ge=0, le=1, allow_inf_nan=False)

    class Config:
        """Integration specs are value objects."""
        frozen = True

    @field_validator("type", mode="before")
    @classmethod
    def resolve_type(cls, v: Any) -> IntegrationType:
        """Unknown integration types are treated as generic APIs."""
        return coerce_enum(IntegrationType, v, IntegrationType.API)


class InfrastructureSpec(BaseModel):
    """Hosting setup the platform will be deployed on."""
    tier: InfrastructureTier = InfrastructureTier.PROFESSIONAL
    regions: int = Field(default=1, ge=1)
    redundancy: bool = False
    autoScaling: bool = False
    cdnEnabled: bool = False

    class Config:
        """Infrastructure specs are value objects."""
        frozen = True

    @field_validator("tier", mode="before")
    @classmethod
    def resolve_tier(cls, v: Any) -> InfrastructureTier:
        """Unknown tiers are treated as professional."""
        return coerce_enum(InfrastructureTier, v, InfrastructureTier.PROFESSIONAL)


class PlatformSpec(BaseModel):
    """Structured description of a platform that has not been built yet."""
    name: str
    sector: Sector = Sector.ENTERPRISE
    features: List[FeatureSpec] = []
    integrations: List[IntegrationSpec] = []
    infrastructure: InfrastructureSpec = InfrastructureSpec()
    expectedUsers: int = Field(default=0, ge=0)
    peakConcurrentUsers: int = Field(default=0, ge=0)
    dataVolume: DataVolume = DataVolume.MEDIUM
    securityLevel: SecurityLevel = SecurityLevel.STANDARD

    class Config:
        """Platform specs are never mutated once submitted."""
        frozen = True

    @field_validator("sector", mode="before")
    @classmethod
    def resolve_sector(cls, v: Any) -> Sector:
        """Unknown sectors are treated as enterprise."""
        return coerce_enum(Sector, v, Sector.ENTERPRISE)

    @field_validator("dataVolume", mode="before")
    @classmethod
    def resolve_data_volume(cls, v: Any) -> DataVolume:
        """Unknown data volumes are treated as medium."""
        return coerce_enum(DataVolume, v, DataVolume.MEDIUM)

    @field_validator("securityLevel", mode="before")
    @classmethod
    def resolve_security_level(cls, v: Any) -> SecurityLevel:
        """Unknown security levels are treated as standard."""
        return coerce_enum(SecurityLevel, v, SecurityLevel.STANDARD)


class RunSimulationRequest(BaseModel):
    """Request body for a full simulation run."""
    platformSpec: PlatformSpec
    simulationType: SimulationType = SimulationType.COMPREHENSIVE

    @field_validator("simulationType", mode="before")
    @classmethod
    def resolve_simulation_type(cls, v: Any) -> SimulationType:
        """Unknown simulation types run as comprehensive."""
        return coerce_enum(SimulationType, v, SimulationType.COMPREHENSIVE)


class QuickEstimateRequest(BaseModel):
    """Request body for the cheap capacity estimate."""
    featureCount: int = Field(default=0, ge=0)
    integrationCount: int = Field(default=0, ge=0)
    expectedUsers: int = Field(default=0, ge=0)
    tier: InfrastructureTier = InfrastructureTier.PROFESSIONAL
    sector: Sector = Sector.ENTERPRISE

    @field_validator("tier", mode="before")
    @classmethod
    def resolve_tier(cls, v: Any) -> InfrastructureTier:
        """Unknown tiers are treated as professional."""
        return coerce_enum(InfrastructureTier, v, InfrastructureTier.PROFESSIONAL)

    @field_validator("sector", mode="before")
    @classmethod
    def resolve_sector(cls, v: Any) -> Sector:
        """Unknown sectors are treated as enterprise."""
        return coerce_enum(Sector, v, Sector.ENTERPRISE)


class QuickEstimateResponse(BaseModel):
    """Result of the cheap capacity estimate."""
    score: int = Field(ge=0, le=100)
    maxUsers: int
    responseTime: int
    warnings: List[str] = []
