"""Deploy tree scaffolding.

Seeds a project's deploy/ directory from the built-in templates on first run.
"""

from .core import ScaffoldManager, ScaffoldSourceMissing

__all__ = [
    "ScaffoldManager",
    "ScaffoldSourceMissing",
]
