from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.files import write_file

logger = logging.getLogger(__name__)


class HostnameStep:
    step_id = "10_hostname"

    def run(self, ctx: ProvisionCtx) -> None:
        hostname = ctx.cfg.hostname
        if not hostname:
            raise RuntimeError("hostname must not be empty")
        write_file(ctx.target_root, "/etc/hostname", hostname + "\n", dry_run=ctx.dry_run)
        logger.info("Configured hostname=%s", hostname)
