"""
Value types shared by the loader, extractor and executor.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_TASK_DESCRIPTION = "Text transformation task"


@dataclass(frozen=True)
class LoadedScript:
    """A task script read from disk and compiled with RestrictedPython."""

    path: Path
    source: str
    code: Any = field(repr=False)

    @property
    def filename(self) -> str:
        return str(self.path)


class RawModule(dict):
    """
    Export surface of an executed task script: the public top-level names it bound.

    Behaves as a plain dict; ``script`` points back to the compiled script so
    tasks decoded from it can be re-materialised in a fresh sandbox.
    """

    def __init__(self, exports: dict[str, Any] | None = None, *, script: LoadedScript | None = None) -> None:
        super().__init__(exports or {})
        self.script = script


@dataclass(frozen=True)
class TransformTask:
    """A named, user-authored transformation discovered in a task script."""

    name: str
    transform: Callable[..., Any] | str = field(repr=False)
    description: str | None = None
    index: int = 0
    script: LoadedScript | None = field(default=None, repr=False, compare=False)

    @property
    def display_description(self) -> str:
        return self.description or DEFAULT_TASK_DESCRIPTION


@dataclass(frozen=True)
class TaskRejection:
    """Why the entry at ``index`` of a script's ``tasks`` was dropped."""

    index: int
    reason: str
