"""
Simulation Router
API endpoints for pre-build capacity and risk simulation
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.models.reference_models import (
    FeatureTypeInfo,
    InfrastructureCatalogue,
    IntegrationTypeInfo,
    SectorPreset,
)
from app.models.result_models import SimulationListResponse, SimulationResult
from app.models.simulation_models import (
    QuickEstimateRequest,
    QuickEstimateResponse,
    RunSimulationRequest,
)
from app.services.simulation_runner import SimulationRunner, simulation_runner
from app.services.validation import SimulationValidationError


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/simulation", tags=["simulation"])


def get_simulation_runner() -> SimulationRunner:
    """Dependency injection for SimulationRunner."""
    return simulation_runner


@router.post("/run", response_model=SimulationResult)
def run_simulation(
    request: RunSimulationRequest,
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> SimulationResult:
    """
    Run the full simulation pipeline for a platform spec.

    Returns performance metrics, load and stress profiles, failure points,
    recommendations and the overall readiness score. The result is stored
    and can be fetched again by id.
    """
    try:
        return runner.run(request.platformSpec, request.simulationType)
    except SimulationValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except Exception as e:
        logger.error("Error in run_simulation: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Simulation failed: {str(e)}",
        ) from e


@router.post("/quick-estimate", response_model=QuickEstimateResponse)
def quick_estimate(
    request: QuickEstimateRequest,
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> QuickEstimateResponse:
    """
    Cheap capacity estimate from a handful of counts.

    Does not run the full pipeline and does not store anything.
    """
    try:
        return runner.quick_estimate(request)
    except Exception as e:
        logger.error("Error in quick_estimate: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute quick estimate",
        ) from e


@router.get("/simulations", response_model=SimulationListResponse)
def list_simulations(
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> SimulationListResponse:
    """List all stored simulations, newest first."""
    items = runner.get_all()
    return SimulationListResponse(items=items, count=len(items))


@router.get("/simulations/{simulation_id}", response_model=SimulationResult)
def get_simulation(
    simulation_id: str,
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> SimulationResult:
    """Fetch one stored simulation by id."""
    result = runner.get_by_id(simulation_id)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Simulation '{simulation_id}' not found",
        )
    return result


@router.get("/config/sectors", response_model=List[SectorPreset])
def get_sector_presets(
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> List[SectorPreset]:
    """Sector presets with their default security level and data volume."""
    return runner.get_sector_presets()


@router.get("/config/feature-types", response_model=List[FeatureTypeInfo])
def get_feature_types(
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> List[FeatureTypeInfo]:
    return runner.get_feature_types()


@router.get("/config/integration-types", response_model=List[IntegrationTypeInfo])
def get_integration_types(
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> List[IntegrationTypeInfo]:
    return runner.get_integration_types()


@router.get("/config/infrastructure", response_model=InfrastructureCatalogue)
def get_infrastructure_catalogue(
    runner: SimulationRunner = Depends(get_simulation_runner),
) -> InfrastructureCatalogue:
    """Infrastructure tiers, data volume classes and security levels."""
    return runner.get_infrastructure_catalogue()


@router.get("/health")
async def simulation_health():
    """Health check endpoint for the simulation router."""
    return {"status": "healthy", "service": "simulation"}
