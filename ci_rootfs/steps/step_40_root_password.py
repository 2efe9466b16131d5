from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.chroot import chroot_cmd

logger = logging.getLogger(__name__)


class RootPasswordStep:
    step_id = "40_root_password"

    def run(self, ctx: ProvisionCtx) -> None:
        chroot_cmd(ctx.target_root, ["passwd", "-d", "root"], env=ctx.locale_env, dry_run=ctx.dry_run)
        logger.info("Cleared root password")
