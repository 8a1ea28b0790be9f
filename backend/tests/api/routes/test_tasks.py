"""Tests for /api/v1/tasks routes."""

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from text_transformer.core.config import settings
from tests.utils.script import write_script

TASKS_URL = f"{settings.API_V1_STR}/tasks/"
TRANSFORM_URL = f"{settings.API_V1_STR}/tasks/transform"


def _body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "task": "Upper",
        "file_name": "/w/notes.txt",
        "selection": {"start": {"line": 0, "character": 0}, "end": {"line": 0, "character": 5}},
        "selected_text": "hello",
    }
    body.update(overrides)
    return body


class TestListTasks:
    def test_lists_tasks(self, client: TestClient, configured_script: Path) -> None:
        write_script(
            configured_script.parent,
            "tasks = [\n"
            "    {'name': 'Upper', 'transform': lambda text, context: text.upper()},\n"
            "    {'name': '', 'transform': lambda text, context: text},\n"
            "    {'name': 'Lower', 'description': 'lower case', 'transform': lambda text, context: text.lower()},\n"
            "]\n",
        )
        r = client.get(TASKS_URL)
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is True
        assert data["data"] == [
            {"name": "Upper", "description": "Text transformation task", "index": 0},
            {"name": "Lower", "description": "lower case", "index": 2},
        ]

    def test_no_tasks(self, client: TestClient, configured_script: Path) -> None:
        write_script(configured_script.parent, "tasks = []\n")
        r = client.get(TASKS_URL)
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is False
        assert data["message"] == "No transformation tasks found in the script file."
        assert data["data"] == []

    def test_not_configured(self, client: TestClient, workspace: Path) -> None:
        r = client.get(TASKS_URL)
        assert r.status_code == 400
        assert "not configured" in r.json()["detail"]

    def test_unsupported_format(
        self, client: TestClient, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write_script(workspace, "tasks = []", name="tasks.txt")
        monkeypatch.setattr(settings, "TRANSFORM_SCRIPT_PATH", "tasks.txt")
        r = client.get(TASKS_URL)
        assert r.status_code == 400
        assert r.json()["detail"] == "Error: Transform file must be a Python file (.py)"


class TestTransform:
    def test_upper(self, client: TestClient, configured_script: Path) -> None:
        r = client.post(TRANSFORM_URL, json=_body())
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is True
        assert data["status"] == "success"
        assert data["message"] == 'Text transformed using "Upper"'
        assert data["data"] == {"task": "Upper", "result": "HELLO", "document_text": None}

    def test_document_text_replaced(self, client: TestClient, configured_script: Path) -> None:
        body = _body(
            selected_text=None,
            document_text="say hello\nbye",
            selection={"start": {"line": 0, "character": 4}, "end": {"line": 0, "character": 9}},
        )
        r = client.post(TRANSFORM_URL, json=body)
        assert r.status_code == 200
        assert r.json()["data"]["document_text"] == "say HELLO\nbye"

    def test_blank_selection_warning(self, client: TestClient, configured_script: Path) -> None:
        r = client.post(TRANSFORM_URL, json=_body(selected_text="   "))
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is False
        assert data["status"] == "warning"
        assert data["message"] == "Please select some text to transform."

    def test_unknown_task_cancelled(self, client: TestClient, configured_script: Path) -> None:
        r = client.post(TRANSFORM_URL, json=_body(task="Nope"))
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "cancelled"
        assert data["message"] is None
        assert data["data"] is None

    def test_transform_error_422(self, client: TestClient, configured_script: Path) -> None:
        write_script(
            configured_script.parent,
            "tasks = [{'name': 'Upper', 'transform': lambda text, context: 42}]\n",
        )
        r = client.post(TRANSFORM_URL, json=_body())
        assert r.status_code == 422
        assert r.json()["detail"] == (
            "Error: Transformation failed: Transform function must return a string"
        )

    def test_selection_order_validated(self, client: TestClient, configured_script: Path) -> None:
        body = _body(
            selection={"start": {"line": 2, "character": 0}, "end": {"line": 1, "character": 0}}
        )
        r = client.post(TRANSFORM_URL, json=body)
        assert r.status_code == 422
        assert "selection start" in r.json()["detail"]
        assert r.json()["detail"].startswith("Error: ")

    def test_script_path_override_disabled(
        self, client: TestClient, configured_script: Path
    ) -> None:
        r = client.post(TRANSFORM_URL, json=_body(script_path="/etc/other.py"))
        assert r.status_code == 403

    def test_script_path_override_enabled(
        self, client: TestClient, configured_script: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "ALLOW_SCRIPT_PATH_OVERRIDE", True)
        write_script(
            configured_script.parent,
            "tasks = [{'name': 'Upper', 'transform': lambda text, context: text + '!'}]\n",
            name="other.py",
        )
        r = client.post(TRANSFORM_URL, json=_body(script_path="transforms/other.py"))
        assert r.status_code == 200
        assert r.json()["data"]["result"] == "hello!"
