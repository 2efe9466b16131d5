from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, Optional

from .build_config import BuildConfig, load_build_config
from .build_state import ensure_build_defaults, load_build_state, mark_failed, run_record, save_build_state
from .context import ProvisionCtx
from .errors import ProvisionError, StepFailed
from .lib.hostarch import host_machine, normalize_machine
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .provision import create_basic_rootfs, create_partuuid_rootfs

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "build/ci-rootfs-state.json"


def _run_recorded(
    *,
    operation: str,
    image: str,
    state_path: str,
    fn: Callable[[Dict[str, Any]], Any],
) -> Dict[str, Any]:
    """Run one operation, persisting its outcome in the run state."""

    state = ensure_build_defaults(load_build_state(state_path))
    rec = run_record(state, operation=operation, image=image)

    try:
        fn(rec)
        return state
    except Exception as e:
        logger.exception("%s failed for %s", operation, image)
        mark_failed(rec, e.step_id if isinstance(e, StepFailed) else None, str(e))
        raise
    finally:
        save_build_state(state_path, state)


def run_basic(
    *,
    build_dir: str,
    resource_dir: str,
    image: str,
    flavour: str,
    cfg: BuildConfig,
    arch: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    dry_run: bool = False,
) -> Dict[str, Any]:
    ctx = ProvisionCtx(
        build_dir=build_dir,
        resource_dir=resource_dir,
        image=image,
        flavour=flavour,
        arch=normalize_machine(arch or cfg.arch or host_machine()),
        cfg=cfg,
        dry_run=dry_run,
    )
    return _run_recorded(
        operation="basic",
        image=image,
        state_path=state_path,
        fn=lambda rec: create_basic_rootfs(ctx, record=rec),
    )


def run_partuuid(
    *,
    source: str,
    dest: str,
    cfg: BuildConfig,
    state_path: str = DEFAULT_STATE_PATH,
    dry_run: bool = False,
) -> Dict[str, Any]:
    return _run_recorded(
        operation="partuuid",
        image=dest,
        state_path=state_path,
        fn=lambda rec: create_partuuid_rootfs(source, dest, cfg=cfg, dry_run=dry_run, record=rec),
    )


def cmd_basic(args: argparse.Namespace, cfg: BuildConfig) -> int:
    run_basic(
        build_dir=args.build_dir,
        resource_dir=args.resource_dir,
        image=args.image,
        flavour=args.flavour,
        cfg=cfg,
        arch=args.arch,
        state_path=args.state,
        dry_run=bool(args.dry_run),
    )
    return 0


def cmd_partuuid(args: argparse.Namespace, cfg: BuildConfig) -> int:
    run_partuuid(
        source=args.source,
        dest=args.dest,
        cfg=cfg,
        state_path=args.state,
        dry_run=bool(args.dry_run),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ci-rootfs")
    p.add_argument("--config", default=None, help="Optional YAML build config")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to run state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without executing them")
    p.add_argument("-v", "--verbose", action="store_true", help="Show command output on the console")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sp = sub.add_parser("basic", help="Customize a rootfs image for CI guests (in place)")
    sp.add_argument("build_dir")
    sp.add_argument("resource_dir")
    sp.add_argument("image")
    sp.add_argument("flavour", help="Release codename, e.g. jammy")
    sp.add_argument("--arch", default=None, help="Override host architecture (x86_64|aarch64)")
    sp.set_defaults(func=cmd_basic)

    sp = sub.add_parser("partuuid", help="Build a partitioned copy of a rootfs image")
    sp.add_argument("source")
    sp.add_argument("dest")
    sp.set_defaults(func=cmd_partuuid)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    configure_logging(log_path=args.log, verbose=bool(args.verbose))

    try:
        cfg = load_build_config(args.config)
        return int(args.func(args, cfg))
    except ProvisionError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
