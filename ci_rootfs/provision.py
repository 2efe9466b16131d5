from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .build_config import BuildConfig
from .build_state import mark_completed
from .context import REQUIRED_RESOURCES, ProvisionCtx
from .errors import PreconditionError
from .lib.command import run_cmd
from .lib.mount import loop_device, mounted, partition_dev
from .lib.storage import PartitionPlan, allocate_image, copy_blocks, image_size_mib, make_ext4, partition_image
from .pipeline import PipelineResult, StepCallback, run_pipeline, step_scope
from .steps import (
    AptSourcesStep,
    FcnetServiceStep,
    HelperToolsStep,
    HostnameStep,
    InitStep,
    InstallPackagesStep,
    RootPasswordStep,
    SshdConfigStep,
    SshKeyStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        HostnameStep(),
        FcnetServiceStep(),
        SshKeyStep(),
        SshdConfigStep(),
        RootPasswordStep(),
        InitStep(),
        HelperToolsStep(),
        AptSourcesStep(),
        InstallPackagesStep(),
    ]


def _recorder(record: Optional[Dict[str, Any]]) -> Optional[StepCallback]:
    if record is None:
        return None
    return lambda step_id: mark_completed(record, step_id)


def check_preconditions(ctx: ProvisionCtx) -> None:
    if not Path(ctx.image).is_file():
        raise PreconditionError(f"Source image missing: {ctx.image}")

    res = Path(ctx.resource_dir)
    if not res.is_dir():
        raise PreconditionError(f"Resource directory missing: {ctx.resource_dir}")
    missing = [name for name in REQUIRED_RESOURCES if not (res / name).is_file()]
    if missing:
        raise PreconditionError(f"Resource directory {ctx.resource_dir} lacks: {', '.join(missing)}")

    if not ctx.flavour.strip():
        raise PreconditionError("flavour (release codename) must not be empty")


def create_basic_rootfs(ctx: ProvisionCtx, *, record: Optional[Dict[str, Any]] = None) -> PipelineResult:
    """Customize the source image in place for CI guests.

    The image is mounted at <build_dir>/mnt/rootfs for the duration of the
    steps and always unmounted before returning. A failing step stops the
    run with StepFailed; the image is not rolled back and should be
    discarded.
    """

    check_preconditions(ctx)
    logger.info(
        "Provisioning %s (flavour=%s arch=%s dry_run=%s)", ctx.image, ctx.flavour, ctx.arch, ctx.dry_run
    )

    try:
        with mounted(ctx.image, ctx.target_root, dry_run=ctx.dry_run):
            return run_pipeline(ctx=ctx, steps=build_steps(), on_step_done=_recorder(record))
    finally:
        if record is not None:
            record.setdefault("artifacts", {}).update(ctx.artifacts)


def create_partuuid_rootfs(
    source: str,
    dest: str,
    *,
    cfg: Optional[BuildConfig] = None,
    dry_run: bool = False,
    record: Optional[Dict[str, Any]] = None,
) -> str:
    """Build dest: one partition at a fixed start sector holding a raw copy of source.

    Returns the destination path. A failure may leave dest partially built;
    the loop device is detached either way.
    """

    cfg = cfg or BuildConfig(raw={})
    if Path(source).resolve() == Path(dest).resolve():
        raise PreconditionError("source and destination images must differ")

    size = image_size_mib(source)
    total = size + cfg.partuuid_extra_mib
    logger.info("Building partuuid image %s (%d MiB from %d MiB source)", dest, total, size)

    done = _recorder(record)

    with step_scope("allocate", done):
        allocate_image(dest, total, dry_run=dry_run)

    with step_scope("partition", done):
        partition_image(PartitionPlan(image=dest, start_sector=cfg.partuuid_start_sector), dry_run=dry_run)

    with loop_device(dest, partscan=True, dry_run=dry_run) as loop_dev:
        part = partition_dev(loop_dev, 1)

        with step_scope("format", done):
            # Make sure the kernel has the fresh partition table.
            run_cmd(["partprobe", loop_dev], dry_run=dry_run)
            make_ext4(part, dry_run=dry_run)

        with step_scope("copy", done):
            copy_blocks(source, part, dry_run=dry_run)

    if record is not None:
        record.setdefault("artifacts", {})["partuuid_image"] = dest
    return dest
