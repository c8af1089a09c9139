from __future__ import annotations
import copy
import os
from typing import Any, Dict

import yaml

CONFIG_ENV_VAR = "ASSET_INFO_CFG"

DEFAULT_CFG: Dict[str, Any] = {
    "lookup": {
        "enabled": True,
        "scheme": "http",
        "host": "support-sp.apple.com",
        "lang": "en_US",
        "timeout": 15,  # seconds; null waits forever
    },
    "registry": {
        "on_snapshot_failure": "skip",  # or "raise"
    },
    "services": {
        "platform": ["IOPlatformExpertDevice"],
        "storage": ["AppleAPFSMedia", "CoreStorageLogical"],
        "wifi": ["AirPort_BrcmNIC", "AirPort_Brcm4360", "AppleBCMWLANCore"],
        "bluetooth": ["AppleBroadcomBluetoothHostController"],
        "ethernet": ["BCM5701Enet", "AppleEthernetAquantiaAqtion"],
        "power": ["IOPMPowerSource"],
    },
    "logging": {
        "level": "WARNING",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in override.items():
        if v is None:
            # "lookup:" with nothing under it keeps the defaults
            continue
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _merge(base[k], v)
        else:
            base[k] = v
    return base


def _validate(cfg: Dict[str, Any], path: str | None) -> None:
    for section in ("lookup", "registry", "services", "logging"):
        if not isinstance(cfg[section], dict):
            raise ValueError(f"Config {path}: '{section}' must be a mapping")
    for group, classes in cfg["services"].items():
        if not isinstance(classes, list) or not all(isinstance(c, str) for c in classes):
            raise ValueError(f"Config {path}: 'services.{group}' must be a list of class names")


def load_config(config_path: str | None = None) -> Dict[str, Any]:
    """
    Defaults deep-merged with an optional YAML file.

    The file comes from ``config_path``, else the ASSET_INFO_CFG environment
    variable. A path that was asked for explicitly but does not exist is an
    error; no path at all means defaults only. Keys left empty keep their
    defaults; sections or service lists of the wrong type raise ValueError.
    """
    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    data: Dict[str, Any] = {}
    if path:
        with open(os.path.expanduser(path), "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

    cfg = _merge(copy.deepcopy(DEFAULT_CFG), data)
    _validate(cfg, path)
    return cfg
