"""
    Exceptions raised by the sysctl reader and the IOKit registry enumerator.

    Every one of them is local to a single field: the report generator catches
    them, omits the line and moves on.
"""


class AssetInfoError(Exception):
    """Base class for every error raised while collecting asset facts."""


class SysctlError(AssetInfoError):
    """A sysctl name could not be resolved, read or reinterpreted."""


class SysctlNotFound(SysctlError):
    """Raised when sysctlnametomib does not know the dotted name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown sysctl name: {name}")


class SysctlReadError(SysctlError):
    """
    Raised when the probe or the sized read fails.

    Args:
        errno: errno captured right after the failing call
        phase: "resolve", "probe" or "read"
    """

    def __init__(self, errno: int, phase: str, target: object = None):
        self.errno = errno
        self.phase = phase
        self.target = target
        message = f"sysctl {phase} failed with errno {errno}"
        if target is not None:
            message += f" ({target})"
        super().__init__(message)


class SysctlSizeMismatch(SysctlError):
    """Raised when the returned buffer is not exactly the size of the requested type."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} bytes from sysctl, got {actual}")


class SysctlInvalidEncoding(SysctlError):
    """Raised when a string value is not valid UTF-8."""


class PropertyTypeMismatch(AssetInfoError):
    """Raised by a PropertyValue accessor asked for the wrong variant."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected a {expected} property, found {actual}")


class EnumerationSkip(AssetInfoError):
    """
    A matched registry entry whose property dictionary could not be copied.

    Only raised when the enumerator runs with the "raise" snapshot policy;
    the default policy logs the entry and skips it.
    """

    def __init__(self, class_name: str, kern_return: int):
        self.class_name = class_name
        self.kern_return = kern_return
        super().__init__(
            f"Could not snapshot properties of a {class_name} entry (kern_return {kern_return})"
        )
