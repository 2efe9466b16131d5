from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from .build_config import BuildConfig

REQUIRED_RESOURCES = ("fcnet-setup.sh", "init.c", "fillmem.c", "readmem.c")


@dataclass(frozen=True)
class ProvisionCtx:
    build_dir: str
    resource_dir: str
    image: str
    flavour: str
    arch: str
    cfg: BuildConfig
    dry_run: bool = False
    artifacts: Dict[str, str] = field(default_factory=dict)

    @property
    def mount_dir(self) -> Path:
        return Path(self.build_dir) / "mnt/rootfs"

    @property
    def target_root(self) -> str:
        return str(self.mount_dir)

    @property
    def ssh_dir(self) -> Path:
        return Path(self.build_dir) / "ssh"

    @property
    def locale_env(self) -> Dict[str, str]:
        return self.cfg.locale_env

    def resource(self, name: str) -> str:
        return str(Path(self.resource_dir) / name)
