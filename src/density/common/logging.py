# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging

from rich.console import Console
from rich.logging import RichHandler

from density.common.environment import Environment

_LOG_FORMAT = "%(message)s"
_DATE_FORMAT = "[%X]"


def setup_rich_logging(level: str | int | None = None) -> None:
    """Configure the root logger to render through rich on stderr.

    Args:
        level: Log level name or number. Defaults to DENSITY_LOG_LEVEL.
    """
    if level is None:
        level = Environment.LOGGING.LOG_LEVEL
    if isinstance(level, str):
        level = level.upper()

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        log_time_format=_DATE_FORMAT,
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
