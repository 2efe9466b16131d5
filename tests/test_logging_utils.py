from __future__ import annotations

import logging

import pytest

from ci_rootfs.lib.command import run_cmd
from ci_rootfs.logging_utils import CONSOLE_HANDLER, FILE_HANDLER, configure_logging, owned_handlers


@pytest.fixture(autouse=True)
def drop_handlers():
    yield
    root = logging.getLogger()
    for h in owned_handlers(root):
        root.removeHandler(h)
        h.close()


def _by_name(name):
    return next(h for h in logging.getLogger().handlers if h.get_name() == name)


def test_file_records_command_output_console_stays_info(tmp_path):
    log = tmp_path / "logs/run.log"
    assert configure_logging(str(log)) == str(log)

    assert _by_name(CONSOLE_HANDLER).level == logging.INFO
    assert _by_name(FILE_HANDLER).level == logging.DEBUG

    run_cmd(["sh", "-c", "echo from-the-tool"])
    _by_name(FILE_HANDLER).flush()
    text = log.read_text(encoding="utf-8")
    assert "CMD sh -c" in text
    assert "STDOUT from-the-tool" in text


def test_verbose_only_changes_console(tmp_path):
    configure_logging(str(tmp_path / "run.log"), verbose=True)
    assert _by_name(CONSOLE_HANDLER).level == logging.DEBUG
    assert _by_name(FILE_HANDLER).level == logging.DEBUG


def test_reconfigure_replaces_handlers(tmp_path):
    configure_logging(str(tmp_path / "a.log"))
    configure_logging(str(tmp_path / "b.log"), also_console=False)

    handlers = owned_handlers(logging.getLogger())
    assert [h.get_name() for h in handlers] == [FILE_HANDLER]
    assert handlers[0].baseFilename == str(tmp_path / "b.log")
