"""
    macOS asset inventory: serial, UDID, model, description, CPU, memory, OS,
    storage, MAC addresses and battery charge.

    Every field is optional. A field whose read fails is logged at DEBUG and
    left out of the report; one failing field never stops the others.
"""
import ctypes
import logging
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Callable, Iterable

import requests

from core.config import DEFAULT_CFG
from core.errors import AssetInfoError
from core.models import AssetField, AssetReport, HardwareService
from reports.formatter import battery_charge, format_mac, format_memory, format_storage
from shared.hardware import get_cpu_info, get_memory_total
from shared.system import get_os_version, get_system_info

logger = logging.getLogger(__name__)

try:
    __version__ = version("asset-info")
except PackageNotFoundError:
    # running from a source checkout that was never installed
    __version__ = "0.0.0"

# per-field failures that only drop the line; ImportError covers a missing PyObjC
FIELD_ERRORS = (
    AssetInfoError, OSError, ValueError, ArithmeticError, ImportError, requests.RequestException,
)


class AssetReportGenerator:
    """
    Collect asset fields from sysctl and the IOKit registry.

    Args:
        reader: SysctlReader-like object (string_for_name / value_for_name)
        enumerator: ServiceEnumerator-like object (enumerate)
        lookup: ProductLookup-like object (describe), or None to skip Description
        services: service class lists, see DEFAULT_CFG["services"]
        os_version: callable returning the OS version line
    """

    def __init__(self, reader: Any, enumerator: Any, lookup: Any = None,
                 services: dict[str, list[str]] | None = None,
                 os_version: Callable[[], str] = get_os_version):
        self.reader = reader
        self.enumerator = enumerator
        self.lookup = lookup
        # an empty group in the config falls back to its default classes
        self.services = dict(DEFAULT_CFG["services"])
        self.services.update({k: v for k, v in (services or {}).items() if v is not None})
        self.os_version = os_version

    # ---- helpers ----

    def _services(self, group: str) -> Iterable[HardwareService]:
        for class_name in self.services.get(group) or []:
            yield from self.enumerator.enumerate(class_name)

    def _first(self, group: str) -> HardwareService | None:
        for service in self._services(group):
            return service
        return None

    def _collect(self, fields: list[AssetField], name: str, func: Callable[[], Any]) -> list[str]:
        try:
            values = func()
        except FIELD_ERRORS as e:
            logger.debug("Skipping %s: %s: %s", name, type(e).__name__, e)
            return []
        if values is None:
            return []
        if isinstance(values, str):
            values = [values]
        for value in values:
            fields.append(AssetField(name, value))
        return list(values)

    # ---- individual fields ----

    def serial(self, platform: HardwareService | None) -> str | None:
        if platform is None or "IOPlatformSerialNumber" not in platform:
            return None
        return platform.get("IOPlatformSerialNumber").as_string()

    def udid(self, platform: HardwareService | None) -> str | None:
        if platform is None or "IOPlatformUUID" not in platform:
            return None
        return platform.get("IOPlatformUUID").as_string()

    def model(self, platform: HardwareService | None) -> str | None:
        if platform is None or "model" not in platform:
            return None
        # stored as NUL terminated data, e.g. b"MacBookPro18,3\x00"
        return platform.get("model").as_bytes().decode("utf-8").rstrip("\x00")

    def description(self, serial: str | None) -> str | None:
        if self.lookup is None or not serial:
            return None
        return self.lookup.describe(serial)

    def cpu(self) -> str:
        return self.reader.string_for_name("machdep.cpu.brand_string")

    def memory(self) -> str:
        return format_memory(self.reader.value_for_name(ctypes.c_uint64, "hw.memsize"))

    def storage(self) -> list[str]:
        sizes = []
        for service in self._services("storage"):
            value = service.get("Size")
            if value is None:
                continue
            try:
                sizes.append(format_storage(value.as_float()))
            except AssetInfoError as e:
                logger.debug("Skipping %s size: %s", service.class_name, e)
        return sizes

    def _macs(self, group: str, key: str) -> list[str]:
        macs = []
        for service in self._services(group):
            value = service.get(key)
            if value is None:
                continue
            try:
                macs.append(format_mac(value.as_bytes()))
            except AssetInfoError as e:
                logger.debug("Skipping %s %s: %s", service.class_name, key, e)
        return macs

    def wifi_macs(self) -> list[str]:
        return self._macs("wifi", "IOMACAddress")

    def bluetooth_macs(self) -> list[str]:
        return self._macs("bluetooth", "BluetoothDeviceAddressData")

    def ethernet_macs(self) -> list[str]:
        macs = []
        for class_name in self.services.get("ethernet") or []:
            for service in self.enumerator.enumerate(class_name):
                value = service.get("IOMACAddress")
                if value is None:
                    continue
                product = service.get("Product Name")
                if product is not None and product.kind == "string" \
                        and product.as_string() == "Thunderbolt Ethernet":
                    # Thunderbolt adapters end the scan of this class
                    break
                try:
                    macs.append(format_mac(value.as_bytes()))
                except AssetInfoError as e:
                    logger.debug("Skipping %s MAC: %s", class_name, e)
        return macs

    def battery(self) -> str | None:
        power = self._first("power")
        if power is None:
            return None
        installed = power.get("BatteryInstalled")
        if installed is None or not installed.as_boolean():
            return None

        current = power.get("CurrentCapacity")
        maximum = power.get("MaxCapacity")
        current_charge = current.as_float() if current is not None else 0.0
        max_charge = maximum.as_float() if maximum is not None else 0.0
        # ZeroDivisionError drops the field when MaxCapacity is missing or 0
        return f"{battery_charge(current_charge, max_charge)}%"

    # ---- report ----

    def collect(self) -> AssetReport:
        fields: list[AssetField] = []

        platform: HardwareService | None = None
        try:
            platform = self._first("platform")
        except FIELD_ERRORS as e:
            logger.debug("Platform expert unavailable: %s", e)

        serials = self._collect(fields, "Serial", lambda: self.serial(platform))
        serial = serials[0] if serials else None
        self._collect(fields, "UDID", lambda: self.udid(platform))
        self._collect(fields, "Model", lambda: self.model(platform))
        self._collect(fields, "Description", lambda: self.description(serial))
        self._collect(fields, "CPU", self.cpu)
        self._collect(fields, "Memory", self.memory)
        self._collect(fields, "OS", self.os_version)
        self._collect(fields, "Storage", self.storage)
        self._collect(fields, "WiFi MAC", self.wifi_macs)
        self._collect(fields, "Bluetooth MAC", self.bluetooth_macs)
        self._collect(fields, "Ethernet MAC", self.ethernet_macs)
        self._collect(fields, "Battery Charge", self.battery)

        return AssetReport(meta=self._meta(), host=self._host(), fields=fields)

    def _meta(self) -> dict[str, Any]:
        return {
            "tool": "asset-info",
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }

    def _host(self) -> dict[str, Any]:
        host: dict[str, Any] = {}
        host.update(get_system_info())
        try:
            host.update(get_cpu_info())
            host["memory_total_bytes"] = get_memory_total()
        except (OSError, RuntimeError) as e:
            logger.debug("psutil host facts unavailable: %s", e)
        return host


def build_generator(cfg: dict[str, Any]) -> AssetReportGenerator:
    """Wire the real sysctl reader, IOKit enumerator and lookup from config."""
    from collectors.mac.product_lookup import ProductLookup
    from helpers.iokit import ServiceEnumerator
    from helpers.sysctl import SysctlReader

    enumerator = ServiceEnumerator(
        on_snapshot_failure=cfg["registry"]["on_snapshot_failure"],
    )
    lookup = ProductLookup.from_config(cfg) if cfg["lookup"]["enabled"] else None
    return AssetReportGenerator(
        reader=SysctlReader(),
        enumerator=enumerator,
        lookup=lookup,
        services=cfg["services"],
    )
