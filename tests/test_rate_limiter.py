from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.middleware.rate_limiter import RateLimitMiddleware


def _build_client(requests_per_minute: int = 2) -> TestClient:
    limited = FastAPI()
    limited.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=requests_per_minute,
        exempt_paths=["/health"],
    )

    @limited.get("/ping")
    def ping():
        return {"ok": True}

    @limited.get("/health")
    def health():
        return {"status": "healthy"}

    return TestClient(limited)


def test_requests_over_limit_are_rejected():
    """Third request inside the window gets 429"""
    client = _build_client()

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 200

    response = client.get("/ping")
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
    assert "Maximum 2 requests per minute" in response.json()["detail"]

def test_exempt_paths_are_never_limited():
    """Health checks pass regardless of the budget"""
    client = _build_client(requests_per_minute=1)

    client.get("/ping")
    assert client.get("/ping").status_code == 429
    for _ in range(5):
        assert client.get("/health").status_code == 200

def test_limits_are_per_client():
    """Forwarded client addresses get separate budgets"""
    client = _build_client(requests_per_minute=1)

    assert client.get("/ping", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 200
    assert client.get("/ping", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429
    assert client.get("/ping", headers={"X-Forwarded-For": "10.0.0.2, 10.0.0.9"}).status_code == 200
