"""Global pytest configuration.

Registers the shared fixture plugin `tests.algorithms.sample_graphs` when it
is importable. Pytest imports the plugin itself so assertion rewriting
applies to it.
"""

from __future__ import annotations

from importlib.util import find_spec

pytest_plugins: list[str] = []
if find_spec("tests.algorithms.sample_graphs") is not None:
    pytest_plugins = ["tests.algorithms.sample_graphs"]
