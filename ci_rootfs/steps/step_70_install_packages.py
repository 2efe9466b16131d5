from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.chroot import chroot_binds
from ..lib.pkg import apt_install, apt_update
from .step_60_apt_sources import profile_for

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "70_install_packages"

    def run(self, ctx: ProvisionCtx) -> None:
        profile = profile_for(ctx)
        packages = [*ctx.cfg.base_packages, *profile.extra_packages]
        env = dict(ctx.locale_env, DEBIAN_FRONTEND="noninteractive")

        with chroot_binds(ctx.target_root, dry_run=ctx.dry_run):
            apt_update(ctx.target_root, env=env, timeout=ctx.cfg.apt_update_timeout, dry_run=ctx.dry_run)
            apt_install(
                ctx.target_root,
                packages,
                env=env,
                timeout=ctx.cfg.apt_install_timeout,
                dry_run=ctx.dry_run,
            )

        logger.info("Installed packages (%s): %s", profile.arch, " ".join(packages))
