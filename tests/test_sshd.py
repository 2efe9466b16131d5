from __future__ import annotations

from ci_rootfs.lib.sshd import rewrite_sshd_config, rewrite_sshd_config_text

STOCK = """\
Include /etc/ssh/sshd_config.d/*.conf
#PermitRootLogin prohibit-password
# PubkeyAuthentication yes
PermitEmptyPasswords no
UsePAM yes
"""


def _count(text: str, line: str) -> int:
    return text.splitlines().count(line)


def test_rewrite_replaces_directives():
    out = rewrite_sshd_config_text(STOCK)
    assert "prohibit-password" not in out
    assert "PermitEmptyPasswords no" not in out
    assert "UsePAM yes" in out
    assert out.endswith("PermitRootLogin yes\nPermitEmptyPasswords yes\nPubkeyAuthentication yes\n")


def test_rewrite_is_idempotent():
    once = rewrite_sshd_config_text(STOCK)
    twice = rewrite_sshd_config_text(once)
    assert once == twice
    for line in ("PermitRootLogin yes", "PermitEmptyPasswords yes", "PubkeyAuthentication yes"):
        assert _count(twice, line) == 1


def test_rewrite_is_case_sensitive():
    out = rewrite_sshd_config_text("permitrootlogin no\n")
    assert "permitrootlogin no" in out


def test_rewrite_leaves_indented_tab_lines():
    # Only '#' and spaces may precede a directive.
    out = rewrite_sshd_config_text("\tPermitRootLogin no\n")
    assert "\tPermitRootLogin no" in out


def test_rewrite_empty_config():
    assert rewrite_sshd_config_text("") == (
        "PermitRootLogin yes\nPermitEmptyPasswords yes\nPubkeyAuthentication yes\n"
    )


def test_rewrite_file_twice(tmp_path):
    cfg = tmp_path / "etc/ssh/sshd_config"
    cfg.parent.mkdir(parents=True)
    cfg.write_text(STOCK, encoding="utf-8")

    rewrite_sshd_config(str(tmp_path))
    rewrite_sshd_config(str(tmp_path))

    text = cfg.read_text(encoding="utf-8")
    assert _count(text, "PermitRootLogin yes") == 1
    assert _count(text, "PubkeyAuthentication yes") == 1
    assert _count(text, "PermitEmptyPasswords yes") == 1


def test_rewrite_dry_run_leaves_file(tmp_path):
    cfg = tmp_path / "etc/ssh/sshd_config"
    cfg.parent.mkdir(parents=True)
    cfg.write_text(STOCK, encoding="utf-8")
    rewrite_sshd_config(str(tmp_path), dry_run=True)
    assert cfg.read_text(encoding="utf-8") == STOCK
