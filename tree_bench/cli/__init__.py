r"""
Command-line interface for tree-bench.

    tree-bench
    tree-bench --depth 3 --seed 42
"""

from tree_bench.cli.main import app, main

__all__ = [
    "app",
    "main",
]
