import logging
import os
import re
from typing import Any

from helpers.unix import get_evidence, run_cmd

logger = logging.getLogger(__name__)

NETWORKSETUP = "networksetup"

# "(1) Wi-Fi" for enabled services, "(*) USB LAN" for disabled ones.
# The "(Hardware Port: ..., Device: en0)" lines do not match.
_SERVICE_LINE = re.compile(r"^\((\d+|\*)\)\s+(.+)$")


def parse_network_service_order(stdout: str) -> list[dict[str, Any]]:
    """
    Parse `networksetup -listnetworkserviceorder` output into
    [{"name": "Wi-Fi", "enabled": True, "position": 1}, ...] in listed order.
    Disabled services have position None.
    """
    services: list[dict[str, Any]] = []
    for line in stdout.splitlines():
        m = _SERVICE_LINE.match(line.strip())
        if not m:
            continue
        marker, name = m.groups()
        services.append({
            "name": name.strip(),
            "enabled": marker != "*",
            "position": None if marker == "*" else int(marker),
        })
    return services


def _not_checked(error: str, remediation: str, evidence: Any, **extra: Any) -> dict[str, Any]:
    return {
        "not_checked": True,
        "error": error,
        "remediation": remediation,
        **extra,
        "evidence": evidence,
    }


def get_network_service_order() -> dict[str, Any]:
    """
    macOS network service order via `networksetup -listnetworkserviceorder`.
    Returns parsed services plus evidence.
    """
    cmd = [NETWORKSETUP, "-listnetworkserviceorder"]
    rc, stdout, stderr = run_cmd(cmd)
    evidence = get_evidence(cmd, rc, stdout, stderr)

    if rc != 0:
        return _not_checked(
            stderr or stdout or "networksetup -listnetworkserviceorder failed",
            "Ensure networksetup is available (macOS only).",
            evidence,
            services=[],
        )

    return {
        "services": parse_network_service_order(stdout),
        "not_checked": False,
        "error": None,
        "remediation": None,
        "evidence": evidence,
    }


def prefer_network_service(name: str = "Wi-Fi") -> dict[str, Any]:
    """
    Move ``name`` to the top of the service order, keeping the relative
    order of everything else. Does nothing when the service is not listed.
    """
    listing = get_network_service_order()
    if listing["not_checked"]:
        return {**listing, "changed": False}

    names = [s["name"] for s in listing["services"]]
    if name not in names:
        logger.info("%s is not a network service; order unchanged", name)
        return {
            "changed": False,
            "order": names,
            "not_checked": False,
            "error": None,
            "remediation": None,
            "evidence": listing["evidence"],
        }

    order = [name] + [n for n in names if n != name]
    cmd = [NETWORKSETUP, "-ordernetworkservices", *order]
    rc, stdout, stderr = run_cmd(cmd)
    evidence = get_evidence(cmd, rc, stdout, stderr)

    if rc != 0:
        return _not_checked(
            stderr or stdout or "networksetup -ordernetworkservices failed",
            "Run as an administrator; changing the service order needs admin rights.",
            evidence,
            changed=False,
            order=names,
        )

    return {
        "changed": True,
        "order": order,
        "not_checked": False,
        "error": None,
        "remediation": None,
        "evidence": evidence,
    }


def set_network_services_enabled(keep: str | None = None) -> dict[str, Any]:
    """
    keep=None: turn on every disabled service.
    keep="Wi-Fi": turn off every enabled service whose name does not contain "Wi-Fi".

    Returns the list of services switched, one evidence entry per
    networksetup call. Needs root.
    """
    if os.geteuid() != 0:
        return _not_checked(
            "Must be run as root",
            "Re-run with sudo.",
            None,
            switched=[],
        )

    listing = get_network_service_order()
    if listing["not_checked"]:
        return {**listing, "switched": []}

    if keep is None:
        targets = [s["name"] for s in listing["services"] if not s["enabled"]]
        state = "on"
    else:
        targets = [s["name"] for s in listing["services"] if s["enabled"] and keep not in s["name"]]
        state = "off"

    switched: list[dict[str, Any]] = []
    errors: list[str] = []
    for service in targets:
        cmd = [NETWORKSETUP, "-setnetworkserviceenabled", service, state]
        rc, stdout, stderr = run_cmd(cmd)
        switched.append({"name": service, "state": state, "ok": rc == 0,
                         "evidence": get_evidence(cmd, rc, stdout, stderr)})
        if rc != 0:
            errors.append(f"{service}: {stderr or stdout or 'failed'}")

    return {
        "switched": switched,
        "not_checked": False,
        "error": "; ".join(errors) or None,
        "remediation": None,
        "evidence": listing["evidence"],
    }
