from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

from .chroot import chroot_cmd

logger = logging.getLogger(__name__)

ARCHIVE_MIRROR = "http://archive.ubuntu.com/ubuntu"
PORTS_MIRROR = "http://ports.ubuntu.com/ubuntu-ports"

BASE_PACKAGES = ["iperf3", "curl", "fio", "screen"]

DEFAULT_MIRRORS: Dict[str, str] = {
    "x86_64": ARCHIVE_MIRROR,
    "aarch64": PORTS_MIRROR,
}

DEFAULT_ARCH_PACKAGES: Dict[str, List[str]] = {
    "x86_64": ["cpuid"],
    "aarch64": [],
}


@dataclass(frozen=True)
class ArchProfile:
    arch: str
    mirror: str
    extra_packages: List[str]


def arch_profile(
    arch: str,
    *,
    mirrors: Mapping[str, str] | None = None,
    arch_packages: Mapping[str, Sequence[str]] | None = None,
    default_mirror: str = ARCHIVE_MIRROR,
) -> ArchProfile:
    """Pick the package mirror and extra packages for a host machine name."""

    mirrors = DEFAULT_MIRRORS if mirrors is None else mirrors
    arch_packages = DEFAULT_ARCH_PACKAGES if arch_packages is None else arch_packages

    if arch not in mirrors and arch not in arch_packages:
        logger.warning("Unknown architecture %s; using %s without extra packages", arch, default_mirror)

    return ArchProfile(
        arch=arch,
        mirror=mirrors.get(arch, default_mirror),
        extra_packages=list(arch_packages.get(arch) or []),
    )


def sources_lines(mirror: str, flavour: str) -> List[str]:
    return [
        f"deb {mirror} {flavour}-updates main",
        f"deb {mirror} {flavour} universe",
    ]


def append_sources_list(target_root: str, lines: Sequence[str], *, dry_run: bool = False) -> List[str]:
    """Append apt source lines to /etc/apt/sources.list, skipping ones already present.

    Returns the lines actually appended.
    """

    p = Path(target_root) / "etc/apt/sources.list"
    raw = p.read_text(encoding="utf-8") if p.exists() else ""
    present = {ln.strip() for ln in raw.splitlines()}
    missing = [ln for ln in lines if ln.strip() not in present]

    if dry_run:
        logger.info("Would append %d line(s) to %s", len(missing), str(p))
        return missing
    if not missing:
        logger.info("apt sources already configured in %s", str(p))
        return missing

    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a", encoding="utf-8") as fh:
        if raw and not raw.endswith("\n"):
            fh.write("\n")
        for ln in missing:
            fh.write(ln + "\n")
    return missing


def apt_update(
    target_root: str,
    *,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> None:
    chroot_cmd(target_root, ["apt-get", "update"], env=env, timeout=timeout, dry_run=dry_run)


def apt_install(
    target_root: str,
    packages: Sequence[str],
    *,
    with_recommends: bool = False,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    argv = [
        "apt-get",
        "-y",
        "install",
    ]
    if not with_recommends:
        argv.append("--no-install-recommends")
    chroot_cmd(
        target_root,
        [*argv, *packages],
        env=env,
        timeout=timeout,
        dry_run=dry_run,
    )
