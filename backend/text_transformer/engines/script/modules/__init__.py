"""
Objects injected into the task-script namespace.
"""

from text_transformer.engines.script.modules.log import make_log_module

__all__ = [
    "make_log_module",
]
