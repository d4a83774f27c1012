import json
import logging

import pytest

from macdevice import __version__, cli
from macdevice.data.device_types import DeviceReport
from macdevice.log_config import _HANDLER_MARK


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.delenv("MACDEVICE_MODEL", raising=False)
    monkeypatch.delenv("MACDEVICE_LOG_LEVEL", raising=False)
    monkeypatch.setenv("MACDEVICE_CONFIG", str(tmp_path / "missing.toml"))
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, _HANDLER_MARK, False):
            root.removeHandler(h)
            h.close()


def test_version(capsys):
    assert cli.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == f"macdevice {__version__}"


def test_report_for_model(capsys):
    assert cli.main(["--model", "Mac16,12"]) == 0
    out = capsys.readouterr().out
    assert "Model identifier: Mac16,12" in out
    assert "MacBook Air (13-inch, M4, 2025)" in out
    assert "Icon:             macbook" in out
    assert "Battery:          yes" in out


def test_json_report(capsys):
    assert cli.main(["--model", "Mac16,10", "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report == {
        "identifier": "Mac16,10",
        "category": "Mac mini",
        "full_name": "Mac mini (2024)",
        "icon": "macmini",
        "has_battery": False,
        "battery_percent": None,
    }


def test_alternate_mappings(tmp_path, capsys):
    table = tmp_path / "table.json"
    table.write_text(json.dumps({"iMac": {"Mac99,1": "iMac (Future)", "Mac99,1_icon": "imac.future"}}))
    assert cli.main(["--model", "Mac99,1", "--mappings", str(table), "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["category"] == "iMac"
    assert report["full_name"] == "iMac (Future)"
    assert report["icon"] == "imac.future"


def test_unknown_model_is_reported_raw(capsys):
    assert cli.main(["--model", "Quantum9,1", "--json"]) == 0
    captured = capsys.readouterr()
    report = json.loads(captured.out)
    assert report["category"] == "Quantum9,1"
    assert report["icon"] == "desktopcomputer"
    assert "Unknown Mac model identifier" in captured.err


def test_bad_argument():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--no-such-flag"])
    assert exc.value.code == 2


def test_format_report():
    report = DeviceReport(
        identifier="Mac16,1",
        category="MacBook Pro",
        full_name="MacBook Pro (14-inch, M4, 2024)",
        icon="macbook",
        has_battery=True,
        battery_percent=64.4,
    )
    lines = cli.format_report(report).splitlines()
    assert lines[0] == "Model identifier: Mac16,1"
    assert lines[-1] == "Battery:          yes (64%)"


def test_format_report_unknown_host():
    report = DeviceReport(
        identifier="",
        category="",
        full_name="",
        icon="desktopcomputer",
        has_battery=False,
    )
    text = cli.format_report(report)
    assert "Model identifier: (unknown)" in text
    assert "Battery:          no" in text


def write_config(tmp_path, body):
    path = tmp_path / "config.toml"
    path.write_text(body, encoding="utf-8")
    return path


def test_config_file_sets_model(tmp_path, capsys):
    cfg = write_config(tmp_path, '[main]\nmodel = "Mac16,10"\n')
    assert cli.main(["--config", str(cfg), "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["identifier"] == "Mac16,10"
    assert report["category"] == "Mac mini"


def test_debug_logs_to_stderr(capsys):
    assert cli.main(["--model", "Mac16,12", "--debug"]) == 0
    captured = capsys.readouterr()
    assert "[DEBUG] macdevice.cli" in captured.err
    assert "MacBook Air" in captured.out


def test_configured_log_file(tmp_path, capsys):
    log_file = tmp_path / "logs" / "macdevice.log"
    cfg = write_config(tmp_path, f"[log]\nfile = {json.dumps(str(log_file))}\n")
    assert cli.main(["--config", str(cfg), "--model", "Mac16,12", "--debug"]) == 0
    assert "MacBook Air" in capsys.readouterr().out
    assert f"macdevice {__version__} starting" in log_file.read_text(encoding="utf-8")


def test_unusable_log_file_falls_back_to_stderr(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    cfg = write_config(tmp_path, f"[log]\nfile = {json.dumps(str(blocker / 'sub' / 'x.log'))}\n")
    assert cli.main(["--config", str(cfg), "--model", "Mac16,12"]) == 0
    captured = capsys.readouterr()
    assert "MacBook Air" in captured.out
    assert "Could not open log file" in captured.err
    root = logging.getLogger()
    assert not any(isinstance(h, logging.FileHandler) and getattr(h, _HANDLER_MARK, False)
                   for h in root.handlers)


def test_non_string_log_file_uses_defaults(tmp_path, capsys):
    cfg = write_config(tmp_path, '[main]\nmodel = "Mac16,10"\n\n[log]\nfile = 5\n')
    assert cli.main(["--config", str(cfg), "--model", "Mac16,12", "--json"]) == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out)["category"] == "MacBook Air"
    assert not list(tmp_path.glob("5*"))
