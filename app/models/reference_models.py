"""Models for the static reference catalogues exposed to clients."""

from typing import List

from pydantic import BaseModel, Field

from app.models.simulation_models import (
    Complexity,
    DataVolume,
    FeatureType,
    InfrastructureTier,
    IntegrationType,
    Sector,
    SecurityLevel,
)


class SectorDefaults(BaseModel):
    """Spec fields pre-filled when a sector is picked."""
    securityLevel: SecurityLevel
    dataVolume: DataVolume

class SectorPreset(BaseModel):
    """Sector entry with its default posture."""
    id: Sector
    name: str
    defaults: SectorDefaults

class FeatureTypeInfo(BaseModel):
    """Feature-type catalogue entry."""
    id: FeatureType
    name: str
    defaultComplexity: Complexity

class IntegrationTypeInfo(BaseModel):
    """Integration-type catalogue entry."""
    id: IntegrationType
    name: str
    defaultLatency: int = Field(ge=0, description="Typical latency in milliseconds")

class TierProfile(BaseModel):
    """Capacity characteristics of an infrastructure tier."""
    id: InfrastructureTier
    name: str
    capacity: int = Field(ge=0, description="Base concurrent user capacity")
    throughputMultiplier: float
    responseTimeBonusMs: int
    maxDatabaseConnections: int

class DataVolumeProfile(BaseModel):
    """Latency and memory cost of a data volume class."""
    id: DataVolume
    name: str
    responseTimePenaltyMs: int
    memoryBonus: int

class SecurityLevelInfo(BaseModel):
    """Security-level catalogue entry."""
    id: SecurityLevel
    name: str
    description: str

class InfrastructureCatalogue(BaseModel):
    """All infrastructure-related catalogues in one payload."""
    tiers: List[TierProfile]
    dataVolumes: List[DataVolumeProfile]
    securityLevels: List[SecurityLevelInfo]
