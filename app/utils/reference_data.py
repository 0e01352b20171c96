"""Reference data for the simulation engine.

Constant lookup tables keyed by enum. The formulas in the simulators read
their tier, volume and catalogue constants from here. All numbers are
heuristics, kept exactly for behavioural compatibility.
"""

import math
from typing import Dict

from app.models.reference_models import (
    DataVolumeProfile,
    FeatureTypeInfo,
    IntegrationTypeInfo,
    SectorDefaults,
    SectorPreset,
    SecurityLevelInfo,
    TierProfile,
)
from app.models.simulation_models import (
    Complexity,
    DataVolume,
    FeatureType,
    InfrastructureTier,
    IntegrationType,
    Sector,
    SecurityLevel,
)


TIER_PROFILES: Dict[InfrastructureTier, TierProfile] = {
    InfrastructureTier.STARTER: TierProfile(
        id=InfrastructureTier.STARTER,
        name="Starter",
        capacity=100,
        throughputMultiplier=1,
        responseTimeBonusMs=0,
        maxDatabaseConnections=20,
    ),
    InfrastructureTier.PROFESSIONAL: TierProfile(
        id=InfrastructureTier.PROFESSIONAL,
        name="Professional",
        capacity=500,
        throughputMultiplier=2.5,
        responseTimeBonusMs=-20,
        maxDatabaseConnections=100,
    ),
    InfrastructureTier.ENTERPRISE: TierProfile(
        id=InfrastructureTier.ENTERPRISE,
        name="Enterprise",
        capacity=2000,
        throughputMultiplier=5,
        responseTimeBonusMs=-40,
        maxDatabaseConnections=500,
    ),
    InfrastructureTier.DEDICATED: TierProfile(
        id=InfrastructureTier.DEDICATED,
        name="Dedicated",
        capacity=10000,
        throughputMultiplier=10,
        responseTimeBonusMs=-60,
        maxDatabaseConnections=2000,
    ),
}

DATA_VOLUME_PROFILES: Dict[DataVolume, DataVolumeProfile] = {
    DataVolume.SMALL: DataVolumeProfile(
        id=DataVolume.SMALL, name="Small", responseTimePenaltyMs=0, memoryBonus=5
    ),
    DataVolume.MEDIUM: DataVolumeProfile(
        id=DataVolume.MEDIUM, name="Medium", responseTimePenaltyMs=20, memoryBonus=15
    ),
    DataVolume.LARGE: DataVolumeProfile(
        id=DataVolume.LARGE, name="Large", responseTimePenaltyMs=50, memoryBonus=25
    ),
    DataVolume.MASSIVE: DataVolumeProfile(
        id=DataVolume.MASSIVE, name="Massive", responseTimePenaltyMs=100, memoryBonus=40
    ),
}

SECURITY_LEVELS: Dict[SecurityLevel, SecurityLevelInfo] = {
    SecurityLevel.STANDARD: SecurityLevelInfo(
        id=SecurityLevel.STANDARD,
        name="Standard",
        description="TLS, hashed credentials and role-based access",
    ),
    SecurityLevel.ENHANCED: SecurityLevelInfo(
        id=SecurityLevel.ENHANCED,
        name="Enhanced",
        description="Adds MFA, audit trails and encryption at rest",
    ),
    SecurityLevel.MILITARY: SecurityLevelInfo(
        id=SecurityLevel.MILITARY,
        name="Military",
        description="Zero-trust networking, hardware keys and geographic isolation",
    ),
}

SECTOR_PRESETS: Dict[Sector, SectorPreset] = {
    Sector.FINANCIAL: SectorPreset(
        id=Sector.FINANCIAL,
        name="Financial",
        defaults=SectorDefaults(securityLevel=SecurityLevel.MILITARY, dataVolume=DataVolume.LARGE),
    ),
    Sector.HEALTHCARE: SectorPreset(
        id=Sector.HEALTHCARE,
        name="Healthcare",
        defaults=SectorDefaults(securityLevel=SecurityLevel.ENHANCED, dataVolume=DataVolume.LARGE),
    ),
    Sector.GOVERNMENT: SectorPreset(
        id=Sector.GOVERNMENT,
        name="Government",
        defaults=SectorDefaults(securityLevel=SecurityLevel.MILITARY, dataVolume=DataVolume.MASSIVE),
    ),
    Sector.EDUCATION: SectorPreset(
        id=Sector.EDUCATION,
        name="Education",
        defaults=SectorDefaults(securityLevel=SecurityLevel.STANDARD, dataVolume=DataVolume.MEDIUM),
    ),
    Sector.ENTERPRISE: SectorPreset(
        id=Sector.ENTERPRISE,
        name="Enterprise",
        defaults=SectorDefaults(securityLevel=SecurityLevel.ENHANCED, dataVolume=DataVolume.LARGE),
    ),
    Sector.ECOMMERCE: SectorPreset(
        id=Sector.ECOMMERCE,
        name="E-Commerce",
        defaults=SectorDefaults(securityLevel=SecurityLevel.ENHANCED, dataVolume=DataVolume.LARGE),
    ),
    Sector.SOCIAL: SectorPreset(
        id=Sector.SOCIAL,
        name="Social",
        defaults=SectorDefaults(securityLevel=SecurityLevel.STANDARD, dataVolume=DataVolume.MASSIVE),
    ),
}

FEATURE_TYPES: Dict[FeatureType, FeatureTypeInfo] = {
    FeatureType.CRUD: FeatureTypeInfo(
        id=FeatureType.CRUD, name="CRUD Operations", defaultComplexity=Complexity.LOW
    ),
    FeatureType.REALTIME: FeatureTypeInfo(
        id=FeatureType.REALTIME, name="Real-time Features", defaultComplexity=Complexity.MEDIUM
    ),
    FeatureType.COMPUTATION: FeatureTypeInfo(
        id=FeatureType.COMPUTATION, name="Heavy Computation", defaultComplexity=Complexity.HIGH
    ),
    FeatureType.FILE_PROCESSING: FeatureTypeInfo(
        id=FeatureType.FILE_PROCESSING, name="File Processing", defaultComplexity=Complexity.HIGH
    ),
    FeatureType.AI_INFERENCE: FeatureTypeInfo(
        id=FeatureType.AI_INFERENCE, name="AI Inference", defaultComplexity=Complexity.HIGH
    ),
    FeatureType.REPORTING: FeatureTypeInfo(
        id=FeatureType.REPORTING, name="Reporting & Analytics", defaultComplexity=Complexity.MEDIUM
    ),
}

INTEGRATION_TYPES: Dict[IntegrationType, IntegrationTypeInfo] = {
    IntegrationType.API: IntegrationTypeInfo(
        id=IntegrationType.API, name="External API", defaultLatency=200
    ),
    IntegrationType.DATABASE: IntegrationTypeInfo(
        id=IntegrationType.DATABASE, name="Database", defaultLatency=50
    ),
    IntegrationType.QUEUE: IntegrationTypeInfo(
        id=IntegrationType.QUEUE, name="Message Queue", defaultLatency=20
    ),
    IntegrationType.STORAGE: IntegrationTypeInfo(
        id=IntegrationType.STORAGE, name="Object Storage", defaultLatency=100
    ),
    IntegrationType.AUTH: IntegrationTypeInfo(
        id=IntegrationType.AUTH, name="Authentication", defaultLatency=150
    ),
    IntegrationType.PAYMENT: IntegrationTypeInfo(
        id=IntegrationType.PAYMENT, name="Payment Gateway", defaultLatency=500
    ),
    IntegrationType.NOTIFICATION: IntegrationTypeInfo(
        id=IntegrationType.NOTIFICATION, name="Notifications", defaultLatency=100
    ),
}

# Integrations whose failure takes revenue or sign-in down with them
CRITICAL_INTEGRATION_TYPES = frozenset({IntegrationType.PAYMENT, IntegrationType.AUTH})


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)
