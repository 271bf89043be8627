"""Shared pytest configuration.

Fixture graphs and the sample-data directory live in
``tests/algorithms/sample_graphs.py`` and are loaded as a plugin, so pytest
applies assertion rewriting to its helpers too.
"""

from __future__ import annotations

from importlib.util import find_spec

pytest_plugins: list[str] = []
if find_spec("tests.algorithms.sample_graphs") is not None:
    pytest_plugins = ["tests.algorithms.sample_graphs"]
