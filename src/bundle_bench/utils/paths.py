"""Path and filesystem helper functions."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable


def ensure_directories(paths: Iterable[Path]) -> list[Path]:
    """Create all directories in the iterable if they do not exist."""

    created_or_existing: list[Path] = []
    for directory in paths:
        directory.mkdir(parents=True, exist_ok=True)
        created_or_existing.append(directory)
    return created_or_existing


def remove_tree(path: Path) -> bool:
    """Delete a directory tree (or single file) if present; return whether anything was removed."""

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def move_tree_contents(source_dir: Path, target_dir: Path) -> int:
    """Move every entry of source_dir into target_dir, replacing same-named entries."""

    if not source_dir.is_dir():
        return 0
    target_dir.mkdir(parents=True, exist_ok=True)
    moved = 0
    for entry in sorted(source_dir.iterdir()):
        destination = target_dir / entry.name
        remove_tree(destination)
        shutil.move(str(entry), str(destination))
        moved += 1
    return moved
