from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import ArchProfile, append_sources_list, arch_profile, sources_lines

logger = logging.getLogger(__name__)


def profile_for(ctx: ProvisionCtx) -> ArchProfile:
    return arch_profile(
        ctx.arch,
        mirrors=ctx.cfg.mirrors,
        arch_packages=ctx.cfg.arch_packages,
        default_mirror=ctx.cfg.default_mirror,
    )


class AptSourcesStep:
    step_id = "60_apt_sources"

    def run(self, ctx: ProvisionCtx) -> None:
        profile = profile_for(ctx)
        added = append_sources_list(
            ctx.target_root,
            sources_lines(profile.mirror, ctx.flavour),
            dry_run=ctx.dry_run,
        )
        logger.info("apt mirror=%s flavour=%s (added %d line(s))", profile.mirror, ctx.flavour, len(added))
