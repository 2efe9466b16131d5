from __future__ import annotations

import platform


def normalize_machine(machine: str) -> str:
    """Map Debian-style arch names onto kernel machine names (`uname -m`)."""

    m = machine.lower()
    return {
        "amd64": "x86_64",
        "x86_64": "x86_64",
        "arm64": "aarch64",
        "aarch64": "aarch64",
    }.get(m, m)


def host_machine() -> str:
    return normalize_machine(platform.machine())
