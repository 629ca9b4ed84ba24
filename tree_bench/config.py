r"""
Benchmark configuration.

Connection settings for every backend are read from TREE_BENCH_-prefixed
environment variables, optionally loaded from a .env file.

    from tree_bench.config import get_env, get_tree_depth

    uri = get_env("NEO4J_URI", default="neo4j://localhost:7687")
    depth = get_tree_depth()
"""

import os
from pathlib import Path

from dotenv import load_dotenv

__all__ = [
    "DEFAULT_TREE_DEPTH",
    "ENV_PREFIX",
    "get_env",
    "get_tree_depth",
]

# Look for .env in current dir or the project root
_env_file = Path(".env")
if not _env_file.exists():
    _env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

ENV_PREFIX = "TREE_BENCH_"

DEFAULT_TREE_DEPTH = 2


def get_env(key: str, *, default: str | None = None) -> str | None:
    """Get environment variable with TREE_BENCH_ prefix.

    Args:
        key: Variable name without prefix (e.g., "NEO4J_URI").
        default: Default value if not set.

    Returns:
        Environment variable value or default.
    """
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def get_tree_depth() -> int:
    """Get the configured tree depth.

    Returns:
        TREE_BENCH_TREE_DEPTH as an integer, or DEFAULT_TREE_DEPTH.

    Raises:
        ValueError: If the value is not a non-negative integer.
    """
    raw = get_env("TREE_DEPTH")
    if raw is None:
        return DEFAULT_TREE_DEPTH
    try:
        depth = int(raw)
    except ValueError as e:
        msg = f"{ENV_PREFIX}TREE_DEPTH must be an integer, got '{raw}'"
        raise ValueError(msg) from e
    if depth < 0:
        msg = f"{ENV_PREFIX}TREE_DEPTH must be non-negative, got {depth}"
        raise ValueError(msg)
    return depth
