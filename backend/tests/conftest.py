from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from text_transformer.core.config import settings
from text_transformer.main import app
from tests.utils.script import UPPER_SCRIPT, write_script


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A workspace root with settings pointing at it and no script configured."""
    monkeypatch.setattr(settings, "WORKSPACE_ROOT", str(tmp_path))
    monkeypatch.setattr(settings, "TRANSFORM_SCRIPT_PATH", None)
    monkeypatch.setattr(settings, "ALLOW_SCRIPT_PATH_OVERRIDE", False)
    return tmp_path


@pytest.fixture
def configured_script(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An Upper task script at <workspace>/transforms/tasks.py, configured by relative path."""
    (workspace / "transforms").mkdir()
    path = write_script(workspace / "transforms", UPPER_SCRIPT)
    monkeypatch.setattr(settings, "TRANSFORM_SCRIPT_PATH", "transforms/tasks.py")
    return path
