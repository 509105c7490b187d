"""remit: command-line emitter for remitter routing configurations.

Reads ``[tool.remitter]`` from a project's ``pyproject.toml``, builds the
emitter, and emits a single event.

Usage::

    remit order.created --data '{"id": 42}' --project /path/to/project
"""
