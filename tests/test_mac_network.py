import pytest

from collectors.mac import mac_network
from collectors.mac.mac_network import (
    parse_network_service_order,
    prefer_network_service,
    set_network_services_enabled,
)

SERVICE_ORDER = """An asterisk (*) denotes that a network service is disabled.
(1) USB 10/100/1000 LAN
(Hardware Port: USB 10/100/1000 LAN, Device: en7)

(2) Wi-Fi
(Hardware Port: Wi-Fi, Device: en0)

(*) Bluetooth PAN
(Hardware Port: Bluetooth PAN, Device: en5)

(3) Thunderbolt Bridge
(Hardware Port: Thunderbolt Bridge, Device: bridge0)
"""


class FakeRunner:
    def __init__(self, listing=SERVICE_ORDER, rc=0):
        self.listing = listing
        self.rc = rc
        self.calls = []

    def __call__(self, cmd, timeout_s=10):
        self.calls.append(cmd)
        if cmd[1] == "-listnetworkserviceorder":
            return self.rc, self.listing, "" if self.rc == 0 else "networksetup: not found"
        return 0, "", ""


@pytest.fixture
def runner(monkeypatch):
    fake = FakeRunner()
    monkeypatch.setattr(mac_network, "run_cmd", fake)
    return fake


def test_parse_service_order():
    services = parse_network_service_order(SERVICE_ORDER)
    assert services == [
        {"name": "USB 10/100/1000 LAN", "enabled": True, "position": 1},
        {"name": "Wi-Fi", "enabled": True, "position": 2},
        {"name": "Bluetooth PAN", "enabled": False, "position": None},
        {"name": "Thunderbolt Bridge", "enabled": True, "position": 3},
    ]


def test_prefer_wifi_moves_it_first(runner):
    result = prefer_network_service("Wi-Fi")
    assert result["changed"] is True
    assert runner.calls[-1] == [
        "networksetup", "-ordernetworkservices",
        "Wi-Fi", "USB 10/100/1000 LAN", "Bluetooth PAN", "Thunderbolt Bridge",
    ]


def test_prefer_missing_service_is_noop(runner):
    result = prefer_network_service("Ethernet")
    assert result["changed"] is False
    assert len(runner.calls) == 1


def test_listing_failure_is_not_checked(monkeypatch):
    monkeypatch.setattr(mac_network, "run_cmd", FakeRunner(rc=127))
    result = prefer_network_service()
    assert result["not_checked"] is True
    assert result["changed"] is False


def test_toggle_requires_root(monkeypatch, runner):
    monkeypatch.setattr(mac_network.os, "geteuid", lambda: 501)
    result = set_network_services_enabled()
    assert result["not_checked"] is True
    assert runner.calls == []


def test_enable_all_disabled_services(monkeypatch, runner):
    monkeypatch.setattr(mac_network.os, "geteuid", lambda: 0)
    result = set_network_services_enabled()
    assert [s["name"] for s in result["switched"]] == ["Bluetooth PAN"]
    assert runner.calls[-1] == ["networksetup", "-setnetworkserviceenabled", "Bluetooth PAN", "on"]


def test_disable_everything_but_matching(monkeypatch, runner):
    monkeypatch.setattr(mac_network.os, "geteuid", lambda: 0)
    result = set_network_services_enabled("Wi")
    assert [(s["name"], s["state"]) for s in result["switched"]] == [
        ("USB 10/100/1000 LAN", "off"),
        ("Thunderbolt Bridge", "off"),
    ]
    assert result["error"] is None
