from __future__ import annotations

import json
from pathlib import Path

import pytest

from rebootless import __version__
from rebootless.ui import cli as cli_module

FIXTURES = Path(__file__).resolve().parents[1] / "data" / "ignition"

RUNTIME_ENV_VARS = (
    "REBOOTLESS_POLICY_FILE",
    "REBOOTLESS_COMMAND_TIMEOUT_SECONDS",
    "REBOOTLESS_SERVICE_TIMEOUT_SECONDS",
    "REBOOTLESS_SYSTEMCTL",
    "REBOOTLESS_UNIT_DIR",
)


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in RUNTIME_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli_module, "configure_logging", lambda **_: None)


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)
    code = excinfo.value.code
    assert isinstance(code, int)
    return code


def _fake_systemctl(tmp_path: Path) -> tuple[Path, Path]:
    log_file = tmp_path / "systemctl.log"
    script = tmp_path / "systemctl"
    script.write_text(f'#!/bin/sh\necho "$@" >> {log_file}\n', encoding="utf-8")
    script.chmod(0o755)
    return script, log_file


def test_plan_without_reboot(capsys: pytest.CaptureFixture[str]) -> None:
    code = _run(["plan", str(FIXTURES / "base.json"), str(FIXTURES / "kubelet-update.json")])

    assert code == cli_module.EXIT_APPLIED
    out = capsys.readouterr().out
    assert "no reboot required" in out
    assert "systemctl reload kubelet.service" in out


def test_plan_with_deleted_file_requires_reboot(capsys: pytest.CaptureFixture[str]) -> None:
    code = _run(["plan", str(FIXTURES / "base.json"), str(FIXTURES / "file-removed.json")])

    assert code == cli_module.EXIT_REBOOT_REQUIRED
    assert "reboot required: deletion (/etc/motd" in capsys.readouterr().out


def test_policy_option_overrides_default(tmp_path: Path) -> None:
    policy_file = tmp_path / "policy.json"
    policy_file.write_text(json.dumps({"rules": []}), encoding="utf-8")

    code = _run(
        [
            "--policy",
            str(policy_file),
            "plan",
            str(FIXTURES / "base.json"),
            str(FIXTURES / "kubelet-update.json"),
        ]
    )

    assert code == cli_module.EXIT_REBOOT_REQUIRED


def test_missing_snapshot_is_a_usage_error(tmp_path: Path) -> None:
    code = _run(["plan", str(tmp_path / "missing.json"), str(FIXTURES / "base.json")])

    assert code == cli_module.EXIT_USAGE


def test_invalid_policy_is_a_usage_error(tmp_path: Path) -> None:
    policy_file = tmp_path / "policy.json"
    policy_file.write_text("{}{", encoding="utf-8")

    code = _run(
        [
            "--policy",
            str(policy_file),
            "plan",
            str(FIXTURES / "base.json"),
            str(FIXTURES / "base.json"),
        ]
    )

    assert code == cli_module.EXIT_USAGE


def test_invalid_timeout_is_a_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REBOOTLESS_COMMAND_TIMEOUT_SECONDS", "soon")

    code = _run(["plan", str(FIXTURES / "base.json"), str(FIXTURES / "base.json")])

    assert code == cli_module.EXIT_USAGE


def test_unknown_subcommand_exits_with_usage() -> None:
    assert _run(["apply"]) == 2


def test_reconcile_writes_below_root_and_reloads(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    systemctl, log_file = _fake_systemctl(tmp_path)
    monkeypatch.setenv("REBOOTLESS_SYSTEMCTL", str(systemctl))
    root = tmp_path / "root"

    code = _run(
        [
            "reconcile",
            str(FIXTURES / "base.json"),
            str(FIXTURES / "kubelet-update.json"),
            "--root",
            str(root),
        ]
    )

    assert code == cli_module.EXIT_APPLIED
    assert (root / "etc/kubernetes/kubelet.conf").read_text() == (
        "kind: KubeletConfiguration\nmaxPods: 250\n"
    )
    assert log_file.read_text().splitlines() == ["reload kubelet.service"]


def test_reconcile_failure_requires_reboot(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    failing = tmp_path / "systemctl"
    failing.write_text("#!/bin/sh\nexit 1\n", encoding="utf-8")
    failing.chmod(0o755)
    monkeypatch.setenv("REBOOTLESS_SYSTEMCTL", str(failing))

    code = _run(
        [
            "reconcile",
            str(FIXTURES / "base.json"),
            str(FIXTURES / "kubelet-update.json"),
            "--root",
            str(tmp_path / "root"),
        ]
    )

    assert code == cli_module.EXIT_REBOOT_REQUIRED


def test_unexpected_error_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_plan(*_: object, **__: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_module, "plan_update", broken_plan)

    code = _run(["plan", str(FIXTURES / "base.json"), str(FIXTURES / "base.json")])

    assert code == cli_module.EXIT_FATAL


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["--version"]) == 0
    assert capsys.readouterr().out.strip().endswith(__version__)
