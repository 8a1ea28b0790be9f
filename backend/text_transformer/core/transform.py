"""
Transformation orchestrator.

guard -> load -> extract -> pick -> execute, with every failure turned into
one TransformOutcome. This is the only place errors from the script engine
are caught; nothing here retries.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from text_transformer.core.config import settings
from text_transformer.engines.script import (
    EditorDocument,
    ScriptPathError,
    TaskExecutor,
    TransformContext,
    TransformTask,
    extract,
    load,
)

logger = logging.getLogger(__name__)

NO_SELECTION_MESSAGE = "Please select some text to transform."
NO_TASKS_MESSAGE = "No transformation tasks found in the script file."
ERROR_PREFIX = "Error: "

PickOne = Callable[[list[TransformTask]], TransformTask | None]
OutcomeStatus = Literal["success", "warning", "error", "cancelled"]


@dataclass(frozen=True)
class TransformOutcome:
    """What the user is told after one run. result is set only on success."""

    status: OutcomeStatus
    message: str | None = None
    result: str | None = None
    task_name: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(cls, task: TransformTask, result: str) -> TransformOutcome:
        return cls(
            status="success",
            message=f'Text transformed using "{task.name}"',
            result=result,
            task_name=task.name,
        )

    @classmethod
    def warning(cls, message: str) -> TransformOutcome:
        return cls(status="warning", message=message)

    @classmethod
    def error(cls, message: str) -> TransformOutcome:
        return cls(status="error", message=message)

    @classmethod
    def cancelled(cls) -> TransformOutcome:
        return cls(status="cancelled")


def resolve_script_path(
    configured: str | None,
    workspace_root: str | os.PathLike[str] | None,
) -> Path:
    """
    Resolve the configured script path (relative to the workspace root, or absolute)
    and check that the file exists. Raises ScriptPathError.
    """
    if not configured or not configured.strip():
        raise ScriptPathError(
            "Executor path not configured. Please set TRANSFORM_SCRIPT_PATH in the environment or .env file."
        )
    path = Path(configured.strip()).expanduser()
    if not path.is_absolute():
        if not workspace_root:
            raise ScriptPathError("No workspace folder found. Please set WORKSPACE_ROOT.")
        path = Path(workspace_root) / path
    if not path.is_file():
        raise ScriptPathError(f"Script file not found: {path}")
    return path


def get_script_path(override: str | None = None) -> Path:
    """Resolve override (when given) or settings.TRANSFORM_SCRIPT_PATH against settings.WORKSPACE_ROOT."""
    configured = override if override is not None else settings.TRANSFORM_SCRIPT_PATH
    return resolve_script_path(configured, settings.WORKSPACE_ROOT)


def load_tasks(script_path: str | os.PathLike[str]) -> list[TransformTask]:
    """Load a task script and return its valid tasks (possibly empty)."""
    return extract(load(script_path))


def pick_by_name(name: str | None) -> PickOne:
    """Picker choosing the first task called name; picks nothing when name is None or unknown."""

    def pick(tasks: list[TransformTask]) -> TransformTask | None:
        if name is None:
            return None
        return next((task for task in tasks if task.name == name), None)

    return pick


def run_transformation(
    script_path: str | os.PathLike[str],
    selected_text: str,
    context: TransformContext,
    pick_one: PickOne,
    *,
    executor: TaskExecutor | None = None,
) -> TransformOutcome:
    """
    Run the task chosen by pick_one from the script at script_path on selected_text.

    Blank selections return a warning without reading the script.
    """
    if not selected_text or selected_text.strip() == "":
        return TransformOutcome.warning(NO_SELECTION_MESSAGE)

    try:
        tasks = load_tasks(script_path)
        if not tasks:
            return TransformOutcome.warning(NO_TASKS_MESSAGE)

        chosen = pick_one(tasks)
        if chosen is None:
            logger.debug("No task chosen from %s", script_path)
            return TransformOutcome.cancelled()

        result = (executor or TaskExecutor()).execute(chosen, selected_text, context)
    except Exception as e:
        logger.warning("Transformation with %s failed: %s", script_path, e, exc_info=True)
        return TransformOutcome.error(f"{ERROR_PREFIX}{e}")

    logger.info("Text transformed using %r", chosen.name)
    return TransformOutcome.success(chosen, result)


def transform_document(
    document: EditorDocument,
    pick_one: PickOne,
    *,
    script_path: str | None = None,
    executor: TaskExecutor | None = None,
) -> TransformOutcome:
    """
    Editor-facing entry point: check the selection, resolve the configured
    script, run the pipeline and apply a successful result to the document.
    """
    selected_text = document.selected_text()
    if not selected_text or selected_text.strip() == "":
        return TransformOutcome.warning(NO_SELECTION_MESSAGE)

    try:
        resolved = get_script_path(script_path)
    except ScriptPathError as e:
        return TransformOutcome.error(str(e))

    outcome = run_transformation(
        resolved,
        selected_text,
        TransformContext(document),
        pick_one,
        executor=executor,
    )
    if outcome.ok and outcome.result is not None:
        document.replace_selection(outcome.result)
    return outcome
