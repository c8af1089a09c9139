import json

import main as cli
from collectors.mac import asset_info
from collectors.mac.asset_info import AssetReportGenerator
from fakes import FakeEnumerator, FakeReader


def fake_build_generator(cfg):
    reader = FakeReader(strings={"machdep.cpu.brand_string": "Apple M1"}, values={"hw.memsize": 8 * 1024 ** 3})
    return AssetReportGenerator(reader, FakeEnumerator(), os_version=lambda: "14.1 (23B74)")


def test_report_prints_lines_and_writes_json(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("ASSET_INFO_CFG", raising=False)
    monkeypatch.setattr(asset_info, "build_generator", fake_build_generator)
    out = tmp_path / "reports" / "asset.json"

    rc = cli.main(["report", "--json", str(out)])

    assert rc == 0
    assert capsys.readouterr().out.splitlines() == ["CPU: Apple M1", "Memory: 8.0 GB", "OS: 14.1 (23B74)"]
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["fields"][0] == {"name": "CPU", "value": "Apple M1"}


def test_default_command_is_report(monkeypatch, capsys):
    monkeypatch.delenv("ASSET_INFO_CFG", raising=False)
    monkeypatch.setattr(asset_info, "build_generator", fake_build_generator)
    assert cli.main([]) == 0
    assert "OS: 14.1 (23B74)" in capsys.readouterr().out


def test_generator_unavailable_exits_1(monkeypatch):
    monkeypatch.delenv("ASSET_INFO_CFG", raising=False)

    def broken(cfg):
        raise ImportError("No module named 'objc'")

    monkeypatch.setattr(asset_info, "build_generator", broken)
    assert cli.main(["report", "--no-lookup"]) == 1


def test_prefer_wifi_reports_failure(monkeypatch, capsys):
    from collectors.mac import mac_network

    monkeypatch.setattr(mac_network, "run_cmd", lambda cmd, timeout_s=10: (127, "", "not found"))
    assert cli.main(["prefer-wifi"]) == 1
    assert "Error" in capsys.readouterr().err


def test_empty_lookup_section_with_no_lookup(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("ASSET_INFO_CFG", raising=False)
    monkeypatch.setattr(asset_info, "build_generator", fake_build_generator)
    path = tmp_path / "cfg.yml"
    path.write_text("lookup:\n", encoding="utf-8")

    assert cli.main(["--config", str(path), "report", "--no-lookup"]) == 0
    assert "CPU: Apple M1" in capsys.readouterr().out


def test_bad_config_exits_1(tmp_path, capsys):
    path = tmp_path / "cfg.yml"
    path.write_text("services:\n  wifi: AirPort_BrcmNIC\n", encoding="utf-8")

    assert cli.main(["--config", str(path)]) == 1
    assert "services.wifi" in capsys.readouterr().err
