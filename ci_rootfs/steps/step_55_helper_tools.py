from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.files import in_root
from ..lib.toolchain import compile_c

# Memory pressure helpers used by the balloon device tests.
HELPER_TOOLS = ("fillmem", "readmem")


class HelperToolsStep:
    step_id = "55_helper_tools"

    def run(self, ctx: ProvisionCtx) -> None:
        for tool in HELPER_TOOLS:
            compile_c(
                ctx.resource(f"{tool}.c"),
                str(in_root(ctx.target_root, f"/sbin/{tool}")),
                compiler=ctx.cfg.compiler,
                dry_run=ctx.dry_run,
            )
