from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..errors import CommandError
from .command import run_cmd

logger = logging.getLogger(__name__)

DRY_RUN_LOOP_DEV = "/dev/loopN"


def _release(argv: list[str], *, strict: bool, dry_run: bool) -> None:
    """Release a kernel resource.

    strict=False is used while another exception is already propagating; the
    release failure is logged so it does not mask the original error.
    """

    r = run_cmd(argv, check=False, dry_run=dry_run)
    if r.returncode == 0:
        return
    if strict:
        raise CommandError(argv, r.returncode, r.stderr)
    logger.error("Release failed (%s): %s %s", r.returncode, " ".join(argv), r.stderr.strip())


@contextmanager
def mounted(source: str, mountpoint: str, *, dry_run: bool = False) -> Iterator[Path]:
    """Mount an image (or device) for the duration of the block.

    The mountpoint is unmounted exactly once on every exit path.
    """

    mp = Path(mountpoint)
    if not dry_run:
        mp.mkdir(parents=True, exist_ok=True)

    run_cmd(["mount", source, str(mp)], dry_run=dry_run)
    logger.info("Mounted %s at %s", source, mp)
    try:
        yield mp
    except BaseException:
        _release(["umount", str(mp)], strict=False, dry_run=dry_run)
        raise
    _release(["umount", str(mp)], strict=True, dry_run=dry_run)
    logger.info("Unmounted %s", mp)


def attach_loop(image: str, *, partscan: bool = True, dry_run: bool = False) -> str:
    argv = ["losetup"]
    if partscan:
        argv.append("--partscan")
    argv += ["--show", "--find", image]
    r = run_cmd(argv, dry_run=dry_run)
    if dry_run:
        return DRY_RUN_LOOP_DEV
    loop_dev = (r.stdout or "").strip()
    if not loop_dev:
        raise CommandError(argv, r.returncode, r.stderr, message=f"losetup returned no device for {image}")
    return loop_dev


@contextmanager
def loop_device(image: str, *, partscan: bool = True, dry_run: bool = False) -> Iterator[str]:
    """Attach image as a loop device; detached on every exit path."""

    loop_dev = attach_loop(image, partscan=partscan, dry_run=dry_run)
    logger.info("Attached %s as %s", image, loop_dev)
    try:
        yield loop_dev
    except BaseException:
        _release(["losetup", "-d", loop_dev], strict=False, dry_run=dry_run)
        raise
    _release(["losetup", "-d", loop_dev], strict=True, dry_run=dry_run)
    logger.info("Detached %s", loop_dev)


def partition_dev(loop_dev: str, n: int) -> str:
    # loop/nvme/mmcblk devices use p suffix
    if loop_dev.endswith(tuple("0123456789")) or loop_dev == DRY_RUN_LOOP_DEV:
        return f"{loop_dev}p{n}"
    return f"{loop_dev}{n}"
