"""
Health-check helpers for liveness and readiness probes.

Liveness  — is the process alive and not deadlocked?  (cheap, no I/O)
Readiness — can it serve transformations?  (configured task script resolves and loads)
"""

import logging

from text_transformer.core.transform import get_script_path, load_tasks
from text_transformer.engines.script import TransformerError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Individual dependency checks
# ---------------------------------------------------------------------------

def check_task_script() -> str | None:
    """Resolve and load the configured task script. Returns None if ok, else the failure message."""
    try:
        load_tasks(get_script_path())
    except TransformerError as e:
        logger.warning("Task script check failed: %s", e)
        return str(e)
    return None


# ---------------------------------------------------------------------------
# Composite probes
# ---------------------------------------------------------------------------

def liveness_check() -> tuple[bool, list[str]]:
    """
    Lightweight liveness probe — just confirms the Python process is responsive.
    No I/O.  Return format matches readiness_check for consistency.
    """
    return (True, [])


def readiness_check() -> tuple[bool, list[str]]:
    """
    Run the task script check.
    Returns (ok, list of failure messages). ok is False if any check fails.
    """
    failures: list[str] = []
    problem = check_task_script()
    if problem is not None:
        failures.append(f"task_script: {problem}")
    return (not failures, failures)
