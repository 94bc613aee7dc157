# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Control and statistics access for the kernel's KSM sysfs interface."""

import logging
import time
from pathlib import Path

from density.common.config.config_defaults import KsmDefaults
from density.common.config.ksm_config import KsmTunables
from density.common.exceptions import KsmControlError

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_KSM_PATH",
    "KSM_RUN_MERGE",
    "KSM_RUN_STOP",
    "KSM_RUN_UNMERGE",
    "disable",
    "enable",
    "read_int",
    "status",
    "write_int",
]

DEFAULT_KSM_PATH = KsmDefaults.PATH

KSM_RUN_STOP = 0
KSM_RUN_MERGE = 1
KSM_RUN_UNMERGE = 2


def _read_int_file(file_path: Path) -> int:
    return int(file_path.read_text().strip())


def _write_int_file(file_path: Path, value: int) -> None:
    try:
        file_path.write_text(str(value))
    except PermissionError as e:
        raise KsmControlError(
            f"Permission denied writing {file_path}. KSM controls require root (try sudo)."
        ) from e
    except OSError as e:
        raise KsmControlError(f"Failed to write {value} to {file_path}: {e}") from e


def read_int(path: Path | str | None, name: str) -> int:
    """Read one numeric KSM file, e.g. ``read_int(path, "pages_shared")``.

    Raises:
        KsmControlError: If the file is missing or not numeric.
    """
    file_path = Path(path or DEFAULT_KSM_PATH) / name
    try:
        return _read_int_file(file_path)
    except (OSError, ValueError) as e:
        raise KsmControlError(f"Failed to read {file_path}: {e}") from e


def write_int(path: Path | str | None, name: str, value: int) -> None:
    """Write one numeric KSM file."""
    _write_int_file(Path(path or DEFAULT_KSM_PATH) / name, value)


def status(path: Path | str | None = None) -> dict[str, int]:
    """Read every numeric file in the KSM sysfs directory.

    Directories and non-numeric files are skipped.

    Raises:
        KsmControlError: If the directory cannot be read or holds no numeric files.
    """
    ksm_path = Path(path or DEFAULT_KSM_PATH)
    try:
        entries = sorted(ksm_path.iterdir())
    except OSError as e:
        raise KsmControlError(f"Cannot read KSM directory {ksm_path}: {e}") from e

    stats: dict[str, int] = {}
    for entry in entries:
        if not entry.is_file():
            continue
        try:
            stats[entry.name] = _read_int_file(entry)
        except (OSError, ValueError):
            continue

    if not stats:
        raise KsmControlError(
            f"No numeric KSM fields found in {ksm_path} (does the kernel support KSM?)"
        )
    return stats


def enable(tunables: KsmTunables, dry_run: bool = False) -> None:
    """Apply the tunables, then start KSM (run=1).

    Tunables are written before the scanner is started so it never runs with stale
    settings.
    """
    if dry_run:
        logger.info(
            f"[dry-run] would enable KSM: pages_to_scan={tunables.pages_to_scan} "
            f"sleep_millisecs={tunables.sleep_millisecs} "
            f"merge_across_nodes={tunables.merge_across_nodes} path={tunables.path}"
        )
        return

    write_int(tunables.path, "pages_to_scan", tunables.pages_to_scan)
    write_int(tunables.path, "sleep_millisecs", tunables.sleep_millisecs)
    if tunables.merge_across_nodes is not None:
        write_int(tunables.path, "merge_across_nodes", tunables.merge_across_nodes)
    write_int(tunables.path, "run", KSM_RUN_MERGE)
    logger.debug(f"KSM enabled at {tunables.path}")


def disable(
    path: Path | str | None = None,
    unmerge: bool = True,
    timeout: float = KsmDefaults.UNMERGE_TIMEOUT_SECONDS,
    dry_run: bool = False,
    poll_interval: float = KsmDefaults.UNMERGE_POLL_INTERVAL,
) -> None:
    """Stop KSM (run=0).

    With ``unmerge``, first sets run=2 and waits until pages_shared drops to 0 or
    ``timeout`` seconds elapse. The wait is best-effort: run=0 is written either way.
    """
    ksm_path = Path(path or DEFAULT_KSM_PATH)
    if timeout <= 0:
        timeout = KsmDefaults.UNMERGE_TIMEOUT_SECONDS

    if dry_run:
        logger.info(
            f"[dry-run] would disable KSM: unmerge={unmerge} timeout={timeout}s path={ksm_path}"
        )
        return

    if unmerge:
        write_int(ksm_path, "run", KSM_RUN_UNMERGE)
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            try:
                if read_int(ksm_path, "pages_shared") == 0:
                    break
            except KsmControlError as e:
                logger.debug(f"Waiting for unmerge: {e}")
            time.sleep(poll_interval)
        else:
            logger.warning(
                f"KSM unmerge did not finish within {timeout}s; stopping anyway"
            )

    write_int(ksm_path, "run", KSM_RUN_STOP)
    logger.debug(f"KSM disabled at {ksm_path}")
