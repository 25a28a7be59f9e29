"""Shared utility helpers."""

from bundle_bench.utils.paths import ensure_directories, move_tree_contents, remove_tree
from bundle_bench.utils.time_utils import now_utc

__all__ = [
    "ensure_directories",
    "move_tree_contents",
    "remove_tree",
    "now_utc",
]
