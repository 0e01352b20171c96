import os

# Tests fire far more requests per minute than the production default allows
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "100000")

import pytest

from app.main import app
from app.models.simulation_models import PlatformSpec
from app.routers.simulation import get_simulation_runner
from app.services.simulation_runner import create_simulation_runner
from app.services.simulation_store import InMemorySimulationStore


BASELINE_SPEC = {
    "name": "Baseline Platform",
    "sector": "education",
    "features": [],
    "integrations": [],
    "infrastructure": {
        "tier": "professional",
        "regions": 1,
        "redundancy": False,
        "autoScaling": False,
        "cdnEnabled": False,
    },
    "expectedUsers": 100,
    "peakConcurrentUsers": 20,
    "dataVolume": "small",
    "securityLevel": "standard",
}

# Financial platform on starter infrastructure; expected to fail readiness
SCENARIO_A_SPEC = {
    "name": "Trading Desk",
    "sector": "financial",
    "features": [
        {
            "id": "f-1",
            "name": "Fraud scoring",
            "type": "ai-inference",
            "complexity": "high",
            "expectedRequestsPerMinute": 1000,
            "dataIntensive": True,
        }
    ],
    "integrations": [
        {
            "id": "pay-1",
            "name": "Card Processor",
            "type": "payment",
            "latencyMs": 500,
            "failureRate": 0.02,
        }
    ],
    "infrastructure": {
        "tier": "starter",
        "regions": 1,
        "redundancy": False,
        "autoScaling": False,
        "cdnEnabled": False,
    },
    "expectedUsers": 5000,
    "peakConcurrentUsers": 500,
    "dataVolume": "large",
    "securityLevel": "enhanced",
}

# Everything sized generously; expected to score 100
HEALTHY_SPEC = {
    "name": "Course Catalogue",
    "sector": "education",
    "features": [
        {
            "id": "f-1",
            "name": "Browse courses",
            "type": "crud",
            "complexity": "low",
            "expectedRequestsPerMinute": 100,
            "dataIntensive": False,
        }
    ],
    "integrations": [],
    "infrastructure": {
        "tier": "dedicated",
        "regions": 3,
        "redundancy": True,
        "autoScaling": True,
        "cdnEnabled": True,
    },
    "expectedUsers": 2000,
    "peakConcurrentUsers": 300,
    "dataVolume": "small",
    "securityLevel": "standard",
}


def _merge(base: dict, overrides: dict) -> dict:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


@pytest.fixture
def make_spec():
    """Build a PlatformSpec from the baseline payload plus overrides."""

    def _make(base: dict = BASELINE_SPEC, **overrides) -> PlatformSpec:
        return PlatformSpec(**_merge(base, overrides))

    return _make


@pytest.fixture
def scenario_a_payload() -> dict:
    return dict(SCENARIO_A_SPEC)


@pytest.fixture
def healthy_payload() -> dict:
    return dict(HEALTHY_SPEC)


@pytest.fixture
def runner():
    """A runner with its own empty store, also used by the API routes."""
    fresh = create_simulation_runner(InMemorySimulationStore())
    app.dependency_overrides[get_simulation_runner] = lambda: fresh
    yield fresh
    app.dependency_overrides.pop(get_simulation_runner, None)
