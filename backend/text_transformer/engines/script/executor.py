"""
TaskExecutor: execute(task, input_text, context) -> str.

Each call builds a fresh sandbox: the task's script is executed again in new
restricted globals, the task is looked up at the same position in ``tasks``
and its transform is called with (input_text, context). Re-running the
module body and the call share one SCRIPT_EXEC_TIMEOUT budget
(signal.SIGALRM on Unix, main thread only). The sandbox
is torn down afterwards, so no module state survives between executions.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

from text_transformer.core.config import settings

from .context import TransformContext
from .errors import ScriptTimeoutError, TransformError
from .extractor import decode_task, task_entries
from .loader import script_globals
from .models import TaskRejection, TransformTask
from .sandbox import Sandbox, open_sandbox, time_limit

logger = logging.getLogger(__name__)


def _describe_value(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


def _transform_in(sandbox: Sandbox, task: TransformTask) -> Callable[..., Any]:
    """The transform of the entry at task.index in a freshly executed sandbox."""
    entries = task_entries(sandbox.exports()) or []
    if task.index >= len(entries):
        raise TransformError(
            f"Transformation failed: task '{task.name}' is no longer defined by the script"
        )
    decoded = decode_task(entries[task.index], task.index, task.script)
    if isinstance(decoded, TaskRejection) or decoded.name != task.name:
        raise TransformError(
            f"Transformation failed: task '{task.name}' is no longer defined by the script"
        )
    if not callable(decoded.transform):
        raise TransformError(
            f"Transformation failed: Transform must be a function, got: "
            f"{type(decoded.transform).__name__}"
        )
    return decoded.transform


class TaskExecutor:
    """
    Run one task's transform in an isolated, time-bounded sandbox.
    """

    def __init__(self, *, timeout_sec: float | None = None) -> None:
        self._timeout_sec = timeout_sec

    @property
    def timeout_sec(self) -> float:
        if self._timeout_sec is not None:
            return self._timeout_sec
        return settings.SCRIPT_EXEC_TIMEOUT

    def execute(self, task: TransformTask, input_text: str, context: TransformContext) -> str:
        """
        Call task.transform(input_text, context) and return its string result.

        Raises TransformError if the transform is not callable, raises, times
        out, or returns anything other than a str. String transforms are never
        compiled here.
        """
        logger.info(
            "Executing transformation for task: %s, transform type: %s",
            task.name,
            type(task.transform).__name__,
        )
        if not callable(task.transform):
            raise TransformError(
                f"Transformation failed: Transform must be a function, got: "
                f"{type(task.transform).__name__}. Value: {_describe_value(task.transform)}"
            )

        # One deadline covers the module body and the transform call together.
        try:
            with time_limit(self.timeout_sec):
                if task.script is None:
                    result = task.transform(input_text, context)
                else:
                    with open_sandbox(
                        task.script,
                        timeout_sec=None,
                        context_dict=script_globals(task.script, task.name),
                    ) as sandbox:
                        transform = _transform_in(sandbox, task)
                        result = transform(input_text, context)
        except TransformError:
            raise
        except ScriptTimeoutError as e:
            logger.debug("Task %s timed out: %s", task.name, e)
            raise TransformError(f"Transformation failed: {e}") from e
        except Exception as e:
            logger.debug("Task %s raised: %s", task.name, e, exc_info=True)
            raise TransformError(f"Transformation failed: {e}") from e

        if not isinstance(result, str):
            raise TransformError("Transformation failed: Transform function must return a string")
        return result


def execute(task: TransformTask, input_text: str, context: TransformContext) -> str:
    """TaskExecutor().execute with the configured timeout."""
    return TaskExecutor().execute(task, input_text, context)
