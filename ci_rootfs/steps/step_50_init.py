from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.files import in_root
from ..lib.toolchain import compile_c

logger = logging.getLogger(__name__)

INIT_PATH = "/sbin/init"
ORIGINAL_INIT_PATH = "/sbin/openrc-init"


class InitStep:
    """Replace /sbin/init with a shim that signals boot completion to the host.

    The distribution init is kept at /sbin/openrc-init; the shim execs it.
    """

    step_id = "50_init"

    def run(self, ctx: ProvisionCtx) -> None:
        init = in_root(ctx.target_root, INIT_PATH)
        original = in_root(ctx.target_root, ORIGINAL_INIT_PATH)

        if ctx.dry_run:
            logger.info("Would move %s -> %s", str(init), str(original))
        elif original.exists() or original.is_symlink():
            # Already moved aside by a previous run; only the shim is rebuilt.
            logger.info("%s already present; keeping it", str(original))
            if init.exists() or init.is_symlink():
                init.unlink()
        elif init.exists() or init.is_symlink():
            init.rename(original)
        else:
            raise RuntimeError(f"No init found at {init}")

        compile_c(ctx.resource("init.c"), str(init), compiler=ctx.cfg.compiler, dry_run=ctx.dry_run)
