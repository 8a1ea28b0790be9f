"""
Task script engine (Python, RestrictedPython).

Exports: load, extract, TaskExecutor, TransformContext, EditorDocument and
the error types raised along the way.
"""

from .context import EditorDocument, Position, SelectionRange, TransformContext
from .errors import (
    FileReadError,
    ScriptParseError,
    ScriptPathError,
    ScriptTimeoutError,
    TransformError,
    TransformerError,
    UnsupportedFormatError,
)
from .executor import TaskExecutor, execute
from .extractor import decode_task, extract
from .loader import load, read_script
from .models import LoadedScript, RawModule, TaskRejection, TransformTask
from .sandbox import build_restricted_globals, compile_script, open_sandbox

__all__ = [
    "EditorDocument",
    "FileReadError",
    "LoadedScript",
    "Position",
    "RawModule",
    "ScriptParseError",
    "ScriptPathError",
    "ScriptTimeoutError",
    "SelectionRange",
    "TaskExecutor",
    "TaskRejection",
    "TransformContext",
    "TransformError",
    "TransformTask",
    "TransformerError",
    "UnsupportedFormatError",
    "build_restricted_globals",
    "compile_script",
    "decode_task",
    "execute",
    "extract",
    "load",
    "open_sandbox",
    "read_script",
]
