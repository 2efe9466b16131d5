from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path

from ..errors import PreconditionError
from .command import run_cmd

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


@dataclass(frozen=True)
class PartitionPlan:
    image: str
    start_sector: int = 2048
    part_type: str = "83"  # Linux
    label: str = "dos"

    def sfdisk_script(self) -> str:
        return "\n".join(
            [
                f"label: {self.label}",
                "",
                f"start={self.start_sector}, type={self.part_type}",
                "",
            ]
        )


def image_size_mib(path: str) -> int:
    """Size of an image in MiB, rounded up like `ls --block-size=M`."""

    p = Path(path)
    if not p.is_file():
        raise PreconditionError(f"Source image missing: {path}")
    return math.ceil(p.stat().st_size / MIB)


def allocate_image(path: str, size_mib: int, *, dry_run: bool = False) -> None:
    run_cmd(["fallocate", "-l", f"{size_mib}M", path], dry_run=dry_run)


def partition_image(plan: PartitionPlan, *, dry_run: bool = False) -> None:
    """Write a single-partition table without user interaction."""

    logger.info("Partitioning %s (label=%s start=%d)", plan.image, plan.label, plan.start_sector)
    run_cmd(["sfdisk", plan.image], input_text=plan.sfdisk_script(), dry_run=dry_run)


def make_ext4(dev: str, *, dry_run: bool = False) -> None:
    run_cmd(["mkfs.ext4", "-F", dev], dry_run=dry_run)


def copy_blocks(src: str, dst: str, *, dry_run: bool = False) -> None:
    run_cmd(["dd", f"if={src}", f"of={dst}", "bs=1M", "conv=fsync"], dry_run=dry_run)
