"""Blocking external command execution with fail-fast error reporting."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from bundle_bench.bench.errors import CommandFailedError

LOGGER = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Callable that runs one command to completion or raises ``CommandFailedError``."""

    def __call__(
        self,
        command: Sequence[str],
        *,
        cwd: Path,
        env_overrides: Mapping[str, str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None: ...


def run_command(
    command: Sequence[str],
    *,
    cwd: Path,
    env_overrides: Mapping[str, str] | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Run command in cwd, judged solely by its exit status.

    Output streams are discarded. There is no timeout: a hung tool hangs the run.
    """

    effective_logger = logger or LOGGER
    argv = [str(part) for part in command]
    env = os.environ.copy()
    if env_overrides:
        env.update({str(k): str(v) for k, v in env_overrides.items()})

    effective_logger.info(
        "process.run cmd=%s cwd=%s env_overrides=%s",
        " ".join(argv),
        cwd,
        ",".join(sorted(env_overrides)) if env_overrides else "-",
    )
    started = time.perf_counter()
    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        effective_logger.error("process.launch_failed cmd=%s error=%s", " ".join(argv), exc)
        raise CommandFailedError(argv, cwd=cwd, returncode=None, reason=str(exc)) from exc

    elapsed = time.perf_counter() - started
    if completed.returncode != 0:
        effective_logger.error(
            "process.failed cmd=%s returncode=%s elapsed_sec=%.2f",
            " ".join(argv),
            completed.returncode,
            elapsed,
        )
        raise CommandFailedError(argv, cwd=cwd, returncode=completed.returncode)
    effective_logger.info("process.ok elapsed_sec=%.2f", elapsed)
