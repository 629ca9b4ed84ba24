r"""
Dataset generators for tree-bench.

    from tree_bench.datasets import RandomTreeGenerator

    root = RandomTreeGenerator(seed=7).generate(2)
"""

from tree_bench.datasets.tree import RandomTreeGenerator, generate_tree

__all__ = [
    "RandomTreeGenerator",
    "generate_tree",
]
