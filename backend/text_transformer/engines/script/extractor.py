"""
Task extractor: turn a script's export surface into TransformTask records.

Malformed entries are filtered, not fatal: decode_task returns a
TaskRejection for them, which is logged and dropped.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .models import LoadedScript, TaskRejection, TransformTask

logger = logging.getLogger(__name__)

TASKS_EXPORT_NAME = "tasks"


def task_entries(raw_module: Any) -> list[Any] | None:
    """The raw ``tasks`` sequence of an export surface, or None when absent or not a list/tuple."""
    if not isinstance(raw_module, Mapping):
        return None
    entries = raw_module.get(TASKS_EXPORT_NAME)
    if not isinstance(entries, list | tuple):
        return None
    return list(entries)


def decode_task(
    entry: Any,
    index: int,
    script: LoadedScript | None = None,
) -> TransformTask | TaskRejection:
    """
    Validate one ``tasks`` entry.

    Accepted iff it is a mapping with a truthy ``name`` and a truthy
    ``transform`` that is a string or a callable.
    """
    if not isinstance(entry, Mapping):
        return TaskRejection(index, f"entry is {type(entry).__name__}, expected dict")

    name = entry.get("name")
    transform = entry.get("transform")
    has_name = bool(name)
    has_transform = bool(transform) and (isinstance(transform, str) or callable(transform))
    logger.debug(
        "Task %s: has_name=%s, has_transform=%s, transform_type=%s",
        name,
        has_name,
        has_transform,
        type(transform).__name__,
    )
    if not has_name:
        return TaskRejection(index, "missing or empty 'name'")
    if not has_transform:
        return TaskRejection(
            index,
            f"'transform' must be a function or string, got {type(transform).__name__}",
        )

    description = entry.get("description")
    if not isinstance(description, str) or not description:
        description = None
    return TransformTask(
        name=str(name),
        transform=transform,
        description=description,
        index=index,
        script=script,
    )


def extract(raw_module: Any, script: LoadedScript | None = None) -> list[TransformTask]:
    """
    Valid tasks of an export surface, in source order. Never raises for bad shapes.

    script defaults to the ``script`` attribute of a RawModule.
    """
    if script is None:
        script = getattr(raw_module, "script", None)
    entries = task_entries(raw_module)
    if entries is None:
        logger.info("Task script exports no '%s' list", TASKS_EXPORT_NAME)
        return []

    tasks: list[TransformTask] = []
    for index, entry in enumerate(entries):
        decoded = decode_task(entry, index, script)
        if isinstance(decoded, TaskRejection):
            logger.warning("Skipping task entry %d: %s", decoded.index, decoded.reason)
            continue
        tasks.append(decoded)
    return tasks
