from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.ssh_keys import ensure_keypair, install_authorized_key, verify_keypair

logger = logging.getLogger(__name__)


class SshKeyStep:
    step_id = "30_ssh_key"

    def run(self, ctx: ProvisionCtx) -> None:
        pair = ensure_keypair(str(ctx.ssh_dir), dry_run=ctx.dry_run)
        public_line = verify_keypair(pair, dry_run=ctx.dry_run)
        install_authorized_key(ctx.target_root, public_line, dry_run=ctx.dry_run)

        ctx.artifacts["ssh_private_key"] = str(pair.private_key)
        ctx.artifacts["ssh_public_key"] = str(pair.public_key)
        logger.info("Root SSH access via %s", str(pair.private_key))
