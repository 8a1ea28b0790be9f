"""
Task script loader: read a script file, compile it and run its module body
in a throwaway sandbox, returning the export surface.

Only Python scripts (``.py``) are supported. The extension is checked
before anything is read.
"""

import logging
import os
from pathlib import Path

from text_transformer.core.config import settings

from .errors import FileReadError, ScriptParseError, ScriptTimeoutError, UnsupportedFormatError
from .models import LoadedScript, RawModule
from .modules import make_log_module
from .sandbox import compile_script, open_sandbox

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".py"})


def check_format(script_path: str | os.PathLike[str]) -> None:
    """Raise UnsupportedFormatError unless the path has a supported extension."""
    ext = Path(script_path).suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError("Transform file must be a Python file (.py)")


def read_script(script_path: str | os.PathLike[str]) -> LoadedScript:
    """Read and compile a task script. Raises UnsupportedFormatError, FileReadError or ScriptParseError."""
    check_format(script_path)
    path = Path(script_path)
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Cannot read script file {path}: {e}") from e

    try:
        code = compile_script(source, filename=str(path))
    except SyntaxError as e:
        raise ScriptParseError(f"Error parsing Python file: {e}") from e
    return LoadedScript(path=path, source=source, code=code)


def script_globals(script: LoadedScript, task_name: str | None = None) -> dict[str, object]:
    """Context injected into every sandbox that runs this script."""
    extra = {"script_path": script.filename}
    if task_name is not None:
        extra["task_name"] = task_name
    return {"log": make_log_module(extra=extra)}


def module_exports(script: LoadedScript, *, timeout_sec: float | None = None) -> RawModule:
    """Run the script's module body in a fresh sandbox and return what it exported."""
    timeout = settings.SCRIPT_EXEC_TIMEOUT if timeout_sec is None else timeout_sec
    try:
        with open_sandbox(
            script, timeout_sec=timeout, context_dict=script_globals(script)
        ) as sandbox:
            return sandbox.exports()
    except (Exception, ScriptTimeoutError) as e:
        logger.warning("Task script %s failed to load: %s", script.filename, e)
        raise ScriptParseError(f"Error parsing Python file: {e}") from e


def load(script_path: str | os.PathLike[str], *, timeout_sec: float | None = None) -> RawModule:
    """Read, compile and execute a task script; return its raw, unvalidated export surface."""
    script = read_script(script_path)
    raw = module_exports(script, timeout_sec=timeout_sec)
    logger.debug("Loaded task script %s, exports: %s", script.filename, sorted(raw))
    return raw
