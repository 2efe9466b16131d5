from __future__ import annotations

import pytest

from ci_rootfs.build_config import DEFAULT_HOSTNAME, BuildConfig, load_build_config
from ci_rootfs.errors import PreconditionError
from ci_rootfs.lib.pkg import ARCHIVE_MIRROR, BASE_PACKAGES, PORTS_MIRROR


def test_defaults():
    cfg = load_build_config(None)
    assert cfg.hostname == DEFAULT_HOSTNAME
    assert cfg.arch is None
    assert cfg.locale_env == {"LC_ALL": "C", "LANG": "C.UTF-8"}
    assert cfg.base_packages == BASE_PACKAGES
    assert cfg.arch_packages["x86_64"] == ["cpuid"]
    assert cfg.mirrors["aarch64"] == PORTS_MIRROR
    assert cfg.default_mirror == ARCHIVE_MIRROR
    assert cfg.apt_install_timeout == 1800
    assert cfg.partuuid_extra_mib == 100
    assert cfg.partuuid_start_sector == 2048


def test_yaml_overrides(tmp_path):
    p = tmp_path / "build.yaml"
    p.write_text(
        """
hostname: ci-guest
arch: aarch64
locale:
  lang: en_US.UTF-8
packages:
  base: [curl]
  arch:
    aarch64: [stress-ng]
mirrors:
  aarch64: http://mirror.local/ports
  default: http://mirror.local/ubuntu
timeouts:
  apt_install: 90
partuuid:
  extra_mib: 16
""",
        encoding="utf-8",
    )
    cfg = load_build_config(str(p))
    assert cfg.hostname == "ci-guest"
    assert cfg.arch == "aarch64"
    assert cfg.locale_env == {"LC_ALL": "C", "LANG": "en_US.UTF-8"}
    assert cfg.base_packages == ["curl"]
    assert cfg.arch_packages == {"x86_64": ["cpuid"], "aarch64": ["stress-ng"]}
    assert cfg.mirrors["aarch64"] == "http://mirror.local/ports"
    assert "default" not in cfg.mirrors
    assert cfg.default_mirror == "http://mirror.local/ubuntu"
    assert cfg.apt_install_timeout == 90
    assert cfg.partuuid_extra_mib == 16


def test_empty_base_packages_allowed():
    assert BuildConfig(raw={"packages": {"base": []}}).base_packages == []


def test_missing_file(tmp_path):
    with pytest.raises(PreconditionError):
        load_build_config(str(tmp_path / "nope.yaml"))


def test_rejects_non_yaml(tmp_path):
    p = tmp_path / "build.json"
    p.write_text("{}", encoding="utf-8")
    with pytest.raises(PreconditionError, match="YAML"):
        load_build_config(str(p))


def test_rejects_non_mapping(tmp_path):
    p = tmp_path / "build.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(PreconditionError, match="mapping"):
        load_build_config(str(p))


def test_explicit_zero_is_kept():
    cfg = BuildConfig(raw={"partuuid": {"extra_mib": 0}, "timeouts": {"apt_install": 0}})
    assert cfg.partuuid_extra_mib == 0
    # 0 disables the limit rather than falling back to the default.
    assert cfg.apt_install_timeout is None
    assert cfg.apt_update_timeout == 600


@pytest.mark.parametrize(
    "raw",
    [
        {"packages": ["curl"]},
        {"packages": {"arch": ["cpuid"]}},
        {"packages": {"base": "curl"}},
        {"mirrors": "http://mirror.local"},
        {"timeouts": {"apt_install": "soon"}},
        {"partuuid": {"start_sector": 0}},
        {"partuuid": {"extra_mib": -1}},
    ],
)
def test_bad_values_are_precondition_errors(raw):
    with pytest.raises(PreconditionError):
        BuildConfig(raw=raw).validate()


def test_load_rejects_bad_section(tmp_path):
    p = tmp_path / "build.yaml"
    p.write_text("packages: [curl]\n", encoding="utf-8")
    with pytest.raises(PreconditionError, match="packages"):
        load_build_config(str(p))


def test_load_rejects_invalid_yaml(tmp_path):
    p = tmp_path / "build.yaml"
    p.write_text("hostname: [unclosed\n", encoding="utf-8")
    with pytest.raises(PreconditionError, match="YAML"):
        load_build_config(str(p))
