r"""
Random tree generator.

Builds a tree of exactly the requested depth where every internal node
has a uniformly random number of children.

    from tree_bench.datasets.tree import RandomTreeGenerator

    generator = RandomTreeGenerator(seed=42)
    root = generator.generate(3)
"""

import random

from tree_bench.types import TreeNode

__all__ = ["RandomTreeGenerator", "generate_tree"]

MIN_CHILDREN = 1
MAX_CHILDREN = 7


class RandomTreeGenerator:
    """Random tree generator with a bounded branching factor."""

    def __init__(
        self,
        *,
        seed: int | None = None,
        min_children: int = MIN_CHILDREN,
        max_children: int = MAX_CHILDREN,
    ) -> None:
        """Initialize generator.

        Args:
            seed: Random seed for reproducibility (unseeded by default).
            min_children: Minimum children of an internal node (at least 1).
            max_children: Maximum children of an internal node (inclusive).
        """
        if min_children < 1:
            msg = f"min_children must be at least 1, got {min_children}"
            raise ValueError(msg)
        if max_children < min_children:
            msg = f"max_children ({max_children}) must be >= min_children ({min_children})"
            raise ValueError(msg)

        self._min_children = min_children
        self._max_children = max_children
        self._random = random.Random(seed)

    def generate(self, depth: int) -> TreeNode:
        """Generate a random tree.

        Args:
            depth: Hop count from the root to every leaf.

        Returns:
            Root of the generated tree.
        """
        if depth < 0:
            msg = f"Tree depth must be non-negative, got {depth}"
            raise ValueError(msg)
        return self._generate_node(depth)

    def _generate_node(self, depth: int) -> TreeNode:
        node = TreeNode()
        if depth == 0:
            return node

        child_count = self._random.randint(self._min_children, self._max_children)
        for _ in range(child_count):
            node.children.append(self._generate_node(depth - 1))
        return node


def generate_tree(depth: int, *, seed: int | None = None) -> TreeNode:
    """Generate a random tree with the default branching factor."""
    return RandomTreeGenerator(seed=seed).generate(depth)
