"""Tests for /api/v1/utils routes (liveness, health-check)."""

from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from text_transformer.core.config import settings


def test_liveness_returns_200(client: TestClient) -> None:
    r = client.get(f"{settings.API_V1_STR}/utils/liveness/")
    assert r.status_code == 200
    assert r.json() is True


def test_health_check_returns_200_when_ready(
    client: TestClient, configured_script: Path
) -> None:
    """GET /health-check/ returns 200 with true when the task script loads."""
    r = client.get(f"{settings.API_V1_STR}/utils/health-check/")
    assert r.status_code == 200
    assert r.json() is True


def test_health_check_returns_503_when_readiness_fails(client: TestClient) -> None:
    """GET /health-check/ returns 503 with envelope when readiness_check fails."""
    with patch(
        "text_transformer.api.routes.utils.readiness_check",
        return_value=(False, ["task_script: Script file not found: /w/tasks.py"]),
    ):
        r = client.get(f"{settings.API_V1_STR}/utils/health-check/")
    assert r.status_code == 503
    data = r.json()
    assert data.get("success") is False
    assert "data" in data
    assert data["data"][0].startswith("task_script")
    assert data["message"] == "Task script unavailable"


def test_liveness_returns_503_when_unhealthy(client: TestClient) -> None:
    with patch(
        "text_transformer.api.routes.utils.liveness_check",
        return_value=(False, ["event loop stalled"]),
    ):
        r = client.get(f"{settings.API_V1_STR}/utils/liveness/")
    assert r.status_code == 503
    assert r.json() == {
        "success": False,
        "message": "Transformer service unhealthy",
        "data": ["event loop stalled"],
    }
