"""Core library for the local lost & found board."""

from . import config, log, errors, models, imaging, filtering, submission, board  # noqa: F401

__all__ = [
    "config",
    "log",
    "errors",
    "models",
    "imaging",
    "filtering",
    "submission",
    "board",
]
