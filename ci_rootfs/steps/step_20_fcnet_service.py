from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.files import install_file, symlink, write_file

logger = logging.getLogger(__name__)

SCRIPT_PATH = "/usr/local/bin/fcnet-setup.sh"
UNIT_PATH = "/etc/systemd/system/fcnet.service"
WANTS_LINK = "/etc/systemd/system/sysinit.target.wants/fcnet.service"


def fcnet_unit(script_path: str = SCRIPT_PATH) -> str:
    return "\n".join(
        [
            "[Service]",
            "Type=oneshot",
            f"ExecStart={script_path}",
            "[Install]",
            "WantedBy=sshd.service",
            "",
        ]
    )


class FcnetServiceStep:
    """Install the guest network-setup script as a oneshot boot service.

    The script assigns each interface the IP encoded in its MAC address; it
    has to run before sshd so the host can reach the guest.
    """

    step_id = "20_fcnet_service"

    def run(self, ctx: ProvisionCtx) -> None:
        root = ctx.target_root
        install_file(ctx.resource("fcnet-setup.sh"), root, SCRIPT_PATH, mode=0o755, dry_run=ctx.dry_run)
        write_file(root, UNIT_PATH, fcnet_unit(), dry_run=ctx.dry_run)
        # Equivalent of `systemctl enable` without needing systemd in the chroot.
        symlink(root, WANTS_LINK, UNIT_PATH, dry_run=ctx.dry_run)
        logger.info("Installed fcnet.service")
