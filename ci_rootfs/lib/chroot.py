from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Mapping, Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

_BINDS = ("/dev", "/proc", "/sys")


def chroot_cmd(
    target_root: str,
    argv: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command inside target root."""

    return run_cmd(["chroot", target_root, *argv], env=env, timeout=timeout, dry_run=dry_run)


def mount_chroot_binds(target_root: str, *, dry_run: bool = False) -> None:
    # Minimal bind mounts for apt and maintainer scripts
    for src in _BINDS:
        run_cmd(["mount", "--bind", src, f"{target_root}{src}"], dry_run=dry_run)


def umount_chroot_binds(target_root: str, *, dry_run: bool = False) -> None:
    for src in reversed(_BINDS):
        run_cmd(["umount", "-lf", f"{target_root}{src}"], check=False, dry_run=dry_run)


@contextmanager
def chroot_binds(target_root: str, *, dry_run: bool = False) -> Iterator[str]:
    try:
        mount_chroot_binds(target_root, dry_run=dry_run)
        yield target_root
    finally:
        # Lazy unmounts; a bind that never got mounted is a harmless no-op.
        umount_chroot_binds(target_root, dry_run=dry_run)
