from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..errors import ProvisionError
from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPair:
    private_key: Path
    public_key: Path


def _key_body(line: str) -> str:
    """Return '<type> <base64>' without the trailing comment."""

    return " ".join(line.strip().split()[:2])


def ensure_keypair(ssh_dir: str, *, name: str = "id_rsa", dry_run: bool = False) -> KeyPair:
    """Generate an RSA key pair with an empty passphrase, reusing an existing one."""

    d = Path(ssh_dir)
    pair = KeyPair(private_key=d / name, public_key=d / f"{name}.pub")

    if pair.private_key.exists() and pair.public_key.exists():
        logger.info("Reusing SSH key pair %s", str(pair.private_key))
        return pair

    if not dry_run:
        d.mkdir(parents=True, exist_ok=True)
        # A lone half (interrupted run) would make ssh-keygen prompt to overwrite.
        for half in (pair.private_key, pair.public_key):
            if half.exists() or half.is_symlink():
                logger.info("Removing unpaired key file %s", str(half))
                half.unlink()
    run_cmd(
        ["ssh-keygen", "-q", "-t", "rsa", "-f", str(pair.private_key), "-N", ""],
        dry_run=dry_run,
    )
    return pair


def verify_keypair(pair: KeyPair, *, dry_run: bool = False) -> str:
    """Check the public key file matches the private key; return the public key line."""

    r = run_cmd(["ssh-keygen", "-y", "-f", str(pair.private_key)], dry_run=dry_run)
    if dry_run:
        return ""

    public_line = pair.public_key.read_text(encoding="utf-8").strip()
    if _key_body(r.stdout) != _key_body(public_line):
        raise ProvisionError(f"{pair.public_key} does not match {pair.private_key}")
    return public_line


def install_authorized_key(target_root: str, public_line: str, *, dry_run: bool = False) -> Path:
    ssh_dir = Path(target_root) / "root/.ssh"
    auth = ssh_dir / "authorized_keys"
    if dry_run:
        logger.info("Would write %s", str(auth))
        return auth

    ssh_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(ssh_dir, 0o700)
    auth.write_text(public_line + "\n", encoding="utf-8")
    os.chmod(auth, 0o600)
    logger.info("Installed root authorized key into %s", str(auth))
    return auth
