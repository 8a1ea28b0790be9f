"""
Error types raised while resolving, loading and running task scripts.

Each pipeline stage raises exactly one of these; the orchestrator in
``text_transformer.core.transform`` is the single place that turns them into
a user-facing message.
"""


class TransformerError(Exception):
    """Base class for every error surfaced to the user."""

    pass


class ScriptPathError(TransformerError):
    """Script path is not configured, cannot be resolved, or does not exist."""

    pass


class FileReadError(TransformerError):
    """Script file could not be read."""

    pass


class UnsupportedFormatError(TransformerError):
    """Script file extension is not a supported task-script format."""

    pass


class ScriptParseError(TransformerError):
    """Script failed to compile or raised while its module body was executing."""

    pass


class TransformError(TransformerError):
    """Task transform is not callable, raised, timed out, or returned a non-string."""

    pass


class ScriptTimeoutError(BaseException):
    """
    Raised inside the sandbox when script code exceeds SCRIPT_EXEC_TIMEOUT.

    Not an Exception subclass, so ``except Exception`` in a script does not
    stop it. Callers outside the sandbox catch it explicitly.
    """

    pass
