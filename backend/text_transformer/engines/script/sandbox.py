"""
RestrictedPython sandbox for task scripts.

Allowed: dict, list, str, int, float, bool, range, enumerate, zip, sorted,
len, round, min, max, sum, abs, json.loads/dumps, a subset of re,
datetime/date/time/timedelta and the sandbox ``log`` object.

Blocked: open, exec, eval, __import__, compile, os, subprocess, attribute
names starting with an underscore, etc.

A Sandbox is one throwaway namespace. ``open_sandbox`` creates one, runs the
script's module body in it and tears it down on exit; sandboxes are never
reused between executions.
"""

import ast
import json
import logging
import operator
import re
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from types import SimpleNamespace
from typing import Any

from RestrictedPython import compile_restricted
from RestrictedPython.Eval import default_guarded_getitem, default_guarded_getiter
from RestrictedPython.Guards import (
    full_write_guard,
    guarded_iter_unpack_sequence,
    guarded_unpack_sequence,
    safe_builtins,
    safer_getattr,
)
from RestrictedPython.PrintCollector import PrintCollector
from RestrictedPython.transformer import RestrictingNodeTransformer

from .errors import ScriptTimeoutError
from .models import LoadedScript, RawModule

logger = logging.getLogger(__name__)

# Re-fire interval once the budget is spent, until the guarded block exits.
TIMER_REPEAT_SEC = 0.05

_INPLACE_OPERATORS = {
    "+=": operator.iadd,
    "-=": operator.isub,
    "*=": operator.imul,
    "/=": operator.itruediv,
    "//=": operator.ifloordiv,
    "%=": operator.imod,
    "**=": operator.ipow,
    "<<=": operator.ilshift,
    ">>=": operator.irshift,
    "&=": operator.iand,
    "^=": operator.ixor,
    "|=": operator.ior,
    "@=": operator.imatmul,
}

_EXTRA_BUILTIN_NAMES = (
    "list",
    "dict",
    "set",
    "tuple",
    "len",
    "range",
    "min",
    "max",
    "sum",
    "abs",
    "sorted",
    "reversed",
    "enumerate",
    "any",
    "all",
    "map",
    "filter",
)


def _make_safe_builtins() -> dict[str, Any]:
    """Builtins visible to scripts. safe_builtins already has str, int, range, sorted, etc."""
    safe = dict(safe_builtins)
    # ScriptTimeoutError derives from BaseException; scripts must not be able to name it.
    safe.pop("BaseException", None)
    return safe


def _inplacevar(op: str, x: Any, y: Any) -> Any:
    """``x op= y`` for a plain name; RestrictedPython rewrites augmented assignment to this call."""
    fn = _INPLACE_OPERATORS.get(op)
    if fn is None:
        raise ValueError(f"Unsupported in-place operator: {op}")
    return fn(x, y)


def _apply(f: Any, *args: Any, **kwargs: Any) -> Any:
    """Calls using ``*args`` or ``**kwargs`` are routed through here."""
    return f(*args, **kwargs)


def _make_guard_globals() -> dict[str, Any]:
    """Guards required by RestrictedPython's rewritten bytecode."""
    return {
        "_getattr_": safer_getattr,
        "_getiter_": default_guarded_getiter,
        "_getitem_": default_guarded_getitem,
        "_iter_unpack_sequence_": guarded_iter_unpack_sequence,
        "_unpack_sequence_": guarded_unpack_sequence,
        "_write_": full_write_guard,
        "_print_": PrintCollector,
        "_inplacevar_": _inplacevar,
        "_apply_": _apply,
    }


class TaskScriptPolicy(RestrictingNodeTransformer):
    """
    RestrictedPython's default policy, plus: no bare ``except:`` and no
    ``except BaseException``. Either would let a script swallow the timeout.
    """

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> ast.AST:
        if node.type is None:
            self.error(node, "Bare 'except:' is not allowed in task scripts; catch Exception instead.")
        else:
            names = node.type.elts if isinstance(node.type, ast.Tuple) else [node.type]
            for name in names:
                if isinstance(name, ast.Name) and name.id == "BaseException":
                    self.error(
                        node,
                        "'except BaseException' is not allowed in task scripts; catch Exception instead.",
                    )
        return super().visit_ExceptHandler(node)


def _make_extra_globals() -> dict[str, Any]:
    """
    Extra safe symbols: json, re, datetime, date, time, timedelta.

    json and re are exposed as namespaces of their functions, not as modules,
    so scripts cannot walk module attributes to reach sys or os.
    """
    return {
        "json": SimpleNamespace(loads=json.loads, dumps=json.dumps),
        "re": SimpleNamespace(
            compile=re.compile,
            escape=re.escape,
            findall=re.findall,
            finditer=re.finditer,
            fullmatch=re.fullmatch,
            match=re.match,
            search=re.search,
            split=re.split,
            sub=re.sub,
            subn=re.subn,
            IGNORECASE=re.IGNORECASE,
            MULTILINE=re.MULTILINE,
            DOTALL=re.DOTALL,
            VERBOSE=re.VERBOSE,
        ),
        "datetime": datetime,
        "date": date,
        "time": time,
        "timedelta": timedelta,
    }


def compile_script(script: str, filename: str = "<script>") -> Any:
    """
    Compile script with RestrictedPython. Raises SyntaxError on failure.

    Returns a code object suitable for exec(bytecode, globals).
    """
    code = compile_restricted(script, filename, "exec", policy=TaskScriptPolicy)
    if code is None:
        raise SyntaxError("RestrictedPython: compile failed")
    return code


def build_restricted_globals(context_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Build the globals dict for exec(compiled, globals): safe builtins, guards,
    extra (json, re, datetime) and the caller's context (e.g. log).
    """
    safe = _make_safe_builtins()
    g: dict[str, Any] = {
        "__builtins__": safe,
        "__name__": "task_script",
        "__metaclass__": type,
    }
    g.update(_make_guard_globals())
    g.update(_make_extra_globals())
    # Common container/utility builtins missing from safe_builtins. Writes and
    # attribute access on the objects they build are still guarded.
    import builtins

    for name in _EXTRA_BUILTIN_NAMES:
        obj = safe.get(name, getattr(builtins, name, None))
        if obj is not None:
            g[name] = obj
    g.update(context_dict)
    return g


def _timer_available() -> bool:
    return (
        hasattr(signal, "SIGALRM")
        and hasattr(signal, "setitimer")
        and threading.current_thread() is threading.main_thread()
    )


@contextmanager
def time_limit(timeout_sec: float | None) -> Iterator[None]:
    """
    Raise ScriptTimeoutError in the running code once timeout_sec elapses.

    Uses signal.setitimer(ITIMER_REAL), so it only bounds code running on the
    main thread of a platform with SIGALRM. Elsewhere the body runs unbounded.
    After the first alarm the timer keeps firing every TIMER_REPEAT_SEC until
    the block exits, so a script that catches one alarm gets the next.
    """
    if timeout_sec is None or timeout_sec <= 0:
        yield
        return
    if not _timer_available():
        logger.debug(
            "SIGALRM timer unavailable on thread %s; running script without timeout",
            threading.current_thread().name,
        )
        yield
        return

    def _handler(signum: int, frame: Any) -> None:
        raise ScriptTimeoutError(f"Script execution timed out after {timeout_sec}s")

    old = signal.signal(signal.SIGALRM, _handler)
    try:
        signal.setitimer(signal.ITIMER_REAL, timeout_sec, TIMER_REPEAT_SEC)
        try:
            yield
        finally:
            signal.setitimer(signal.ITIMER_REAL, 0)
    finally:
        signal.signal(signal.SIGALRM, old)


class Sandbox:
    """
    One isolated namespace for a single script. Create through open_sandbox.
    """

    def __init__(self, script: LoadedScript, context_dict: dict[str, Any] | None = None) -> None:
        self.script = script
        self.namespace = build_restricted_globals(context_dict or {})
        self._baseline = dict(self.namespace)
        self.closed = False

    def run_module(self, timeout_sec: float | None) -> None:
        """Execute the script's module body in this sandbox's namespace."""
        if self.closed:
            raise RuntimeError("sandbox is closed")
        with time_limit(timeout_sec):
            exec(self.script.code, self.namespace)  # noqa: S102 - RestrictedPython compiled code

    def exports(self) -> RawModule:
        """Public names the module body bound or rebound (underscore names and sandbox helpers excluded)."""
        exported = {}
        for name, value in self.namespace.items():
            if name.startswith("_"):
                continue
            if name in self._baseline and self._baseline[name] is value:
                continue
            exported[name] = value
        return RawModule(exported, script=self.script)

    def close(self) -> None:
        self.namespace.clear()
        self._baseline.clear()
        self.closed = True


@contextmanager
def open_sandbox(
    script: LoadedScript,
    *,
    timeout_sec: float | None,
    context_dict: dict[str, Any] | None = None,
) -> Iterator[Sandbox]:
    """Fresh sandbox with the script's module body already executed; torn down on exit."""
    sandbox = Sandbox(script, context_dict)
    try:
        sandbox.run_module(timeout_sec)
        yield sandbox
    finally:
        sandbox.close()
