"""Grablin CLI: turn a declarative project description into a generated codebase.

Usage::

    from grablin.schema import validate
    from grablin.store import load

    config = load("grablin.json")
    result = validate(config)
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
