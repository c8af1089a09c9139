"""
macOS IOKit registry enumeration.

ServiceEnumerator returns the property dictionaries of every registry entry
matching a service class (e.g. "IOPlatformExpertDevice") as HardwareService
snapshots. Registry calls go through an IORegistry backend that loads the
IOKit functions with PyObjC, so the enumeration logic can run against a fake
registry off macOS.

Every iterator and service handle obtained here is released exactly once,
on every exit path.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Literal

from core.errors import EnumerationSkip, PropertyTypeMismatch
from core.models import HardwareService, PropertyValue

logger = logging.getLogger(__name__)

KERN_SUCCESS = 0

# kIOMasterPortDefault / kIOMainPortDefault are both 0 (NULL port)
IO_MAIN_PORT_DEFAULT = 0

SnapshotPolicy = Literal["skip", "raise"]

# (name, PyObjC signature) - io_object_t and mach_port_t are uint32 ("I")
_IOKIT_FUNCTIONS = [
    ("IOServiceMatching", b"@r*"),
    ("IOServiceGetMatchingServices", b"iI@o^I"),
    ("IOIteratorNext", b"II"),
    ("IOObjectRelease", b"iI"),
    ("IORegistryEntryCreateCFProperties", b"iIo^@@I"),
]


class IORegistry:
    """
    Thin wrapper around the IOKit registry functions, loaded via PyObjC.

    Values coming back from the registry are Foundation objects; to_python()
    turns them into plain Python types (NSData -> bytes, NSArray -> list, ...).
    """

    def __init__(self):
        import objc
        import Foundation

        self._foundation = Foundation
        bundle = Foundation.NSBundle.bundleWithIdentifier_("com.apple.framework.IOKit")
        if bundle is None:
            raise OSError("IOKit framework bundle not found")

        functions: dict[str, Any] = {}
        objc.loadBundleFunctions(bundle, functions, _IOKIT_FUNCTIONS)
        self._fn = functions

    def get_matching_services(self, class_name: str) -> tuple[int, int]:
        """Return (kern_return, iterator handle) for a service class name."""
        matching = self._fn["IOServiceMatching"](class_name.encode("utf-8"))
        return self._fn["IOServiceGetMatchingServices"](IO_MAIN_PORT_DEFAULT, matching, None)

    def iterator_next(self, iterator: int) -> int:
        return self._fn["IOIteratorNext"](iterator)

    def create_properties(self, service: int) -> tuple[int, Any]:
        """Return (kern_return, property dict) for a service handle."""
        kr, props = self._fn["IORegistryEntryCreateCFProperties"](service, None, None, 0)
        if kr != KERN_SUCCESS or props is None:
            return kr, None
        return kr, self.to_python(props)

    def release(self, handle: int) -> None:
        self._fn["IOObjectRelease"](handle)

    def to_python(self, value: Any) -> Any:
        Foundation = self._foundation
        if isinstance(value, Foundation.NSDictionary):
            return {str(k): self.to_python(v) for k, v in value.items()}
        if isinstance(value, Foundation.NSArray):
            return [self.to_python(v) for v in value]
        if isinstance(value, Foundation.NSData):
            return bytes(value)
        if isinstance(value, str):
            return str(value)
        # NSNumber arrives already bridged to bool / int / float
        return value


class ServiceEnumerator:
    """
    Enumerate registry entries by service class.

    Args:
        registry: IORegistry-like backend. Defaults to the real IOKit one.
        on_snapshot_failure: "skip" silently drops entries whose properties
            cannot be copied; "raise" raises EnumerationSkip instead.
    """

    def __init__(self, registry: Any = None, on_snapshot_failure: SnapshotPolicy = "skip"):
        if on_snapshot_failure not in ("skip", "raise"):
            raise ValueError(f"Unknown snapshot policy: {on_snapshot_failure!r}")
        self._registry = registry if registry is not None else IORegistry()
        self.on_snapshot_failure = on_snapshot_failure

    @contextmanager
    def _held(self, handle: int) -> Iterator[int]:
        try:
            yield handle
        finally:
            self._registry.release(handle)

    def enumerate(self, class_name: str) -> list[HardwareService]:
        """
        Snapshot every registry entry matching ``class_name``.

        Returns an empty list when nothing matches or the matching call fails.
        """
        kr, iterator = self._registry.get_matching_services(class_name)
        if kr != KERN_SUCCESS or not iterator:
            logger.debug("No iterator for %s (kern_return %s)", class_name, kr)
            return []

        services: list[HardwareService] = []
        with self._held(iterator):
            while True:
                service = self._registry.iterator_next(iterator)
                if not service:
                    break
                with self._held(service):
                    snapshot = self._snapshot(class_name, service)
                if snapshot is not None:
                    services.append(snapshot)

        logger.debug("Enumerated %d %s entries", len(services), class_name)
        return services

    def first(self, class_name: str) -> HardwareService | None:
        services = self.enumerate(class_name)
        return services[0] if services else None

    def _snapshot(self, class_name: str, service: int) -> HardwareService | None:
        kr, props = self._registry.create_properties(service)
        if kr != KERN_SUCCESS or props is None:
            if self.on_snapshot_failure == "raise":
                raise EnumerationSkip(class_name, kr)
            logger.debug("Skipping %s entry: properties unavailable (kern_return %s)", class_name, kr)
            return None

        properties: dict[str, PropertyValue] = {}
        for key, value in props.items():
            try:
                properties[str(key)] = PropertyValue.from_python(value)
            except PropertyTypeMismatch:
                logger.debug("Dropping %s.%s: unsupported type %s", class_name, key, type(value).__name__)

        return HardwareService(class_name=class_name, properties=properties)
