from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def in_root(root: str, rel: str) -> Path:
    return Path(root) / rel.lstrip("/")


def write_file(root: str, rel: str, contents: str, *, mode: int | None = None, dry_run: bool = False) -> Path:
    p = in_root(root, rel)
    if dry_run:
        logger.info("Would write %s", str(p))
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    if mode is not None:
        os.chmod(p, mode)
    return p


def install_file(src: str, root: str, rel: str, *, mode: int = 0o644, dry_run: bool = False) -> Path:
    s = Path(src)
    if not s.exists():
        raise FileNotFoundError(src)

    p = in_root(root, rel)
    if dry_run:
        logger.info("Would install %s -> %s", str(s), str(p))
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(s, p)
    os.chmod(p, mode)
    return p


def symlink(root: str, rel: str, target: str, *, dry_run: bool = False) -> Path:
    """Create rel -> target inside root; target is resolved by the guest, not the host."""

    p = in_root(root, rel)
    if dry_run:
        logger.info("Would link %s -> %s", str(p), target)
        return p
    if p.is_symlink() and os.readlink(p) == target:
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    if p.is_symlink() or p.exists():
        p.unlink()
    p.symlink_to(target)
    return p
