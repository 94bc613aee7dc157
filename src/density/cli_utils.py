# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import sys
from typing import NoReturn

from rich.console import Console
from rich.panel import Panel


def raise_startup_error_and_exit(
    message: str,
    title: str = "Error",
    exit_code: int = 1,
) -> NoReturn:
    """Render an error panel on stderr and exit.

    Args:
        message: Error message shown in the panel body
        title: Panel title
        exit_code: Process exit code
    """
    console = Console(stderr=True)
    console.print(
        Panel(
            message,
            title=f"[bold red]{title}[/bold red]",
            border_style="red",
            expand=False,
        )
    )
    sys.exit(exit_code)
