from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import PreconditionError
from .lib.pkg import ARCHIVE_MIRROR, BASE_PACKAGES, DEFAULT_ARCH_PACKAGES, DEFAULT_MIRRORS

DEFAULT_HOSTNAME = "ubuntu-fc-uvm"


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PreconditionError(f"config section {where} must be a mapping, got {type(value).__name__}")
    return value


def _str_list(value: Any, where: str) -> List[str]:
    if isinstance(value, str) or not isinstance(value, list):
        raise PreconditionError(f"config {where} must be a list of package names")
    return [str(v) for v in value]


@dataclass(frozen=True)
class BuildConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        return _mapping(self.raw.get(name), name)

    @property
    def hostname(self) -> str:
        return str(self.raw.get("hostname") or DEFAULT_HOSTNAME).strip()

    @property
    def arch(self) -> Optional[str]:
        arch = self.raw.get("arch")
        return str(arch) if arch else None

    @property
    def locale_env(self) -> Dict[str, str]:
        loc = self._section("locale")
        return {
            "LC_ALL": str(loc.get("lc_all") or "C"),
            "LANG": str(loc.get("lang") or "C.UTF-8"),
        }

    @property
    def base_packages(self) -> List[str]:
        pkgs = self._section("packages").get("base")
        return list(BASE_PACKAGES) if pkgs is None else _str_list(pkgs, "packages.base")

    @property
    def arch_packages(self) -> Dict[str, List[str]]:
        out = {k: list(v) for k, v in DEFAULT_ARCH_PACKAGES.items()}
        per_arch = _mapping(self._section("packages").get("arch"), "packages.arch")
        for arch, pkgs in per_arch.items():
            out[str(arch)] = _str_list(pkgs or [], f"packages.arch.{arch}")
        return out

    @property
    def mirrors(self) -> Dict[str, str]:
        out = dict(DEFAULT_MIRRORS)
        for arch, url in self._section("mirrors").items():
            if arch != "default":
                out[str(arch)] = str(url)
        return out

    @property
    def default_mirror(self) -> str:
        return str(self._section("mirrors").get("default") or ARCHIVE_MIRROR)

    @property
    def compiler(self) -> str:
        return str(self.raw.get("compiler") or "gcc")

    @property
    def apt_update_timeout(self) -> Optional[float]:
        return self._timeout("apt_update", 600)

    @property
    def apt_install_timeout(self) -> Optional[float]:
        return self._timeout("apt_install", 1800)

    @property
    def partuuid_extra_mib(self) -> int:
        return self._int("partuuid", "extra_mib", 100, minimum=0)

    @property
    def partuuid_start_sector(self) -> int:
        # Sector 0 holds the partition table itself.
        return self._int("partuuid", "start_sector", 2048, minimum=1)

    def validate(self) -> "BuildConfig":
        """Read every setting once so a bad value fails before anything is mounted."""

        for name in (
            "hostname", "arch", "locale_env", "base_packages", "arch_packages", "mirrors",
            "default_mirror", "compiler", "apt_update_timeout", "apt_install_timeout",
            "partuuid_extra_mib", "partuuid_start_sector",
        ):
            getattr(self, name)
        return self

    def _timeout(self, key: str, default: float) -> Optional[float]:
        """Seconds for an apt step; 0 disables the limit."""

        value = self._section("timeouts").get(key)
        if value is None:
            return default
        try:
            seconds = float(value)
        except (TypeError, ValueError) as e:
            raise PreconditionError(f"timeouts.{key} must be a number, got {value!r}") from e
        return seconds if seconds > 0 else None

    def _int(self, section: str, key: str, default: int, *, minimum: int) -> int:
        value = self._section(section).get(key)
        if value is None:
            return default
        try:
            n = int(value)
        except (TypeError, ValueError) as e:
            raise PreconditionError(f"{section}.{key} must be an integer, got {value!r}") from e
        if n < minimum:
            raise PreconditionError(f"{section}.{key} must be >= {minimum}, got {n}")
        return n


def load_build_config(path: Optional[str]) -> BuildConfig:
    """Load YAML config; no path means built-in defaults."""

    if not path:
        return BuildConfig(raw={})

    p = Path(path)
    if not p.exists():
        raise PreconditionError(f"Config file missing: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise PreconditionError("config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise PreconditionError(f"{path} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise PreconditionError(f"{path} must contain a mapping/object")

    return BuildConfig(raw=raw).validate()
