from __future__ import annotations

import logging
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)


def compile_c(src: str, out: str, *, compiler: str = "gcc", dry_run: bool = False) -> Path:
    """Build a single-file C program on the host, writing the binary into the image."""

    o = Path(out)
    if not dry_run:
        o.parent.mkdir(parents=True, exist_ok=True)
    run_cmd([compiler, "-o", str(o), src], dry_run=dry_run)
    return o
