"""
Engines: task script engine (Python, RestrictedPython).
"""

from text_transformer.engines.script import TaskExecutor, extract, load

__all__ = [
    "TaskExecutor",
    "extract",
    "load",
]
