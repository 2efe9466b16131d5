from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.sshd import rewrite_sshd_config


class SshdConfigStep:
    step_id = "35_sshd_config"

    def run(self, ctx: ProvisionCtx) -> None:
        rewrite_sshd_config(ctx.target_root, dry_run=ctx.dry_run)
