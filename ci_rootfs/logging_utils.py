from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

DEFAULT_LOG_PATH = "logs/ci-rootfs.log"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Handlers we own carry one of these names so a second call can replace them.
FILE_HANDLER = "ci-rootfs-file"
CONSOLE_HANDLER = "ci-rootfs-console"


def _open_log_file(log_path: str) -> logging.FileHandler:
    """Open log_path, or ./ci-rootfs.log when the build host refuses it."""

    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path)
    except OSError:
        return logging.FileHandler(Path.cwd() / "ci-rootfs.log")


def owned_handlers(logger: logging.Logger) -> List[logging.Handler]:
    return [h for h in logger.handlers if h.get_name() in {FILE_HANDLER, CONSOLE_HANDLER}]


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    *,
    verbose: bool = False,
    also_console: bool = True,
) -> str:
    """Send logs to a file and, optionally, the console.

    The file always records DEBUG, which includes the stdout/stderr of every
    external command. The console shows INFO unless verbose is set.
    Returns the log file actually in use.
    """

    root = logging.getLogger()
    for h in owned_handlers(root):
        root.removeHandler(h)
        h.close()
    root.setLevel(logging.DEBUG)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    file_handler = _open_log_file(log_path)
    file_handler.set_name(FILE_HANDLER)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.set_name(CONSOLE_HANDLER)
        console.setLevel(logging.DEBUG if verbose else logging.INFO)
        console.setFormatter(fmt)
        root.addHandler(console)

    actual = file_handler.baseFilename
    if actual != os.path.abspath(log_path):
        logging.getLogger(__name__).warning("Cannot write %s; logging to %s", log_path, actual)
    return actual
