"""Atomic writers for benchmark report artifacts."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable
from uuid import uuid4

import polars as pl


def _atomic_temp_path(target_path: Path) -> Path:
    return target_path.parent / f".{target_path.name}.{uuid4().hex}.tmp"


def _replace_atomically(output_path: Path, write: Callable[[Path], object]) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _atomic_temp_path(output_path)
    try:
        write(temp_path)
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path


def write_json_atomically(payload: dict[str, Any], output_path: Path) -> Path:
    """Write the run summary payload as sorted, indented JSON."""

    rendered = json.dumps(payload, indent=2, sort_keys=True, default=str) + "\n"
    return _replace_atomically(output_path, lambda tmp: tmp.write_text(rendered, encoding="utf-8"))


def write_csv_atomically(df: pl.DataFrame, output_path: Path) -> Path:
    """Write the per-variant size table as CSV."""

    return _replace_atomically(output_path, df.write_csv)


def write_markdown_atomically(text: str, output_path: Path) -> Path:
    return _replace_atomically(output_path, lambda tmp: tmp.write_text(text, encoding="utf-8"))
