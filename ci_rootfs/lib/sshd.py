from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Mapping, Pattern

logger = logging.getLogger(__name__)

# Disposable CI images: root may log in with an empty password or a key.
TEST_IMAGE_DIRECTIVES: Dict[str, str] = {
    "PermitRootLogin": "yes",
    "PermitEmptyPasswords": "yes",
    "PubkeyAuthentication": "yes",
}


def _directive_pattern(keys: Iterable[str]) -> Pattern[str]:
    # Same shape as `sed -E '/^[# ]*Key .+$/d'`: keys are case-sensitive and
    # only a run of '#'/space may precede them.
    return re.compile(r"^[# ]*(?:" + "|".join(re.escape(k) for k in keys) + r") .+$")


def rewrite_sshd_config_text(text: str, directives: Mapping[str, str] = TEST_IMAGE_DIRECTIVES) -> str:
    pattern = _directive_pattern(directives)

    kept = [ln for ln in text.splitlines() if not pattern.match(ln)]
    while kept and not kept[-1].strip():
        kept.pop()

    out = kept + [""] if kept else []
    out += [f"{k} {v}" for k, v in directives.items()]
    return "\n".join(out) + "\n"


def rewrite_sshd_config(target_root: str, *, dry_run: bool = False) -> Path:
    """Drop existing root-login/auth directives and append the test-image values.

    Running it more than once yields the same file.
    """

    p = Path(target_root) / "etc/ssh/sshd_config"
    if dry_run:
        logger.info("Would rewrite %s", str(p))
        return p

    text = p.read_text(encoding="utf-8") if p.exists() else ""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(rewrite_sshd_config_text(text), encoding="utf-8")
    logger.info("Rewrote %s", str(p))
    return p
