"""CI rootfs provisioning (Python-first, step-driven).

Core design goals:
- Strictly ordered, fail-fast steps
- Scoped mounts and loop devices (always released)
- Architecture-aware package and mirror selection
- Centralized logging
"""

__all__ = []
