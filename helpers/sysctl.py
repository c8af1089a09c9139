"""
macOS sysctl access through libSystem via ctypes.

SysctlReader resolves dotted names such as "hw.memsize" to their MIB
(identifier path), reads the raw bytes with the usual two-call protocol and
reinterprets them as a fixed-size ctypes value or a UTF-8 string.

The read is two separate sysctl calls: a probe with a NULL buffer to learn
the size, then the real read into a buffer of exactly that size. The value
can grow between the two calls; in that case the second call fails with
ENOMEM and the read fails. There is deliberately no retry loop.
"""

import ctypes
import ctypes.util
import errno
import logging
from ctypes import POINTER, c_char_p, c_int, c_size_t, c_uint, c_void_p, sizeof
from typing import Any

from core.errors import (
    SysctlInvalidEncoding,
    SysctlNotFound,
    SysctlReadError,
    SysctlSizeMismatch,
)
from core.models import ControlPath

logger = logging.getLogger(__name__)

LIBSYSTEM_PATH = "/usr/lib/libSystem.B.dylib"

# from sys/sysctl.h
CTL_MAXNAME = 12


def load_libc() -> ctypes.CDLL:
    """Load the C library with errno capture and declare the sysctl prototypes."""
    path = ctypes.util.find_library("c") or LIBSYSTEM_PATH
    libc = ctypes.CDLL(path, use_errno=True)

    libc.sysctlnametomib.argtypes = [c_char_p, POINTER(c_int), POINTER(c_size_t)]
    libc.sysctlnametomib.restype = c_int

    libc.sysctl.argtypes = [
        POINTER(c_int), c_uint, c_void_p, POINTER(c_size_t), c_void_p, c_size_t
    ]
    libc.sysctl.restype = c_int
    return libc


class SysctlReader:
    """
    Typed reads of sysctl values.

    Args:
        libc: object exposing ``sysctlnametomib`` and ``sysctl`` with the C
            calling convention. Defaults to the system C library.

    Examples:
        >>> reader = SysctlReader()
        >>> reader.value_for_name(ctypes.c_uint64, "hw.memsize")
        17179869184
        >>> reader.string_for_name("machdep.cpu.brand_string")
        'Apple M1'
    """

    def __init__(self, libc: Any = None):
        self._libc = libc if libc is not None else load_libc()

    def resolve(self, name: str) -> ControlPath:
        """
        Convert a dotted name like "hw.memsize" to its MIB, e.g. (6, 24).

        Raises:
            SysctlNotFound: the kernel does not know the name (ENOENT)
            SysctlReadError: any other sysctlnametomib failure
        """
        mib = (c_int * CTL_MAXNAME)()
        count = c_size_t(CTL_MAXNAME)

        if self._libc.sysctlnametomib(name.encode("utf-8"), mib, ctypes.pointer(count)) != 0:
            err = ctypes.get_errno()
            if err == errno.ENOENT:
                raise SysctlNotFound(name)
            raise SysctlReadError(err, "resolve", name)

        return tuple(mib[:count.value])

    def read_raw(self, path: ControlPath) -> bytes:
        """
        Read the raw bytes behind a MIB.

        The returned buffer is exactly the probed length, even if the second
        call reports that fewer bytes were written.

        Raises:
            SysctlReadError: the probe or the sized read failed
        """
        mib = (c_int * len(path))(*path)
        size = c_size_t(0)

        # Phase 1: probe with a NULL destination to learn the required size
        if self._libc.sysctl(mib, len(path), None, ctypes.pointer(size), None, 0) != 0:
            raise SysctlReadError(ctypes.get_errno(), "probe", path)

        # Phase 2: read into a buffer of exactly the probed size
        buffer = ctypes.create_string_buffer(size.value)
        if self._libc.sysctl(mib, len(path), buffer, ctypes.pointer(size), None, 0) != 0:
            raise SysctlReadError(ctypes.get_errno(), "read", path)

        return buffer.raw

    def as_value(self, ctype: Any, path: ControlPath) -> Any:
        """
        Read ``path`` and reinterpret the buffer as ``ctype``.

        Simple ctypes (c_uint64, c_int32, ...) return their Python value;
        Structure, Union and array types are returned as instances.

        Raises:
            SysctlSizeMismatch: the buffer is not exactly sizeof(ctype) bytes
        """
        raw = self.read_raw(path)
        if len(raw) != sizeof(ctype):
            raise SysctlSizeMismatch(sizeof(ctype), len(raw))

        result = ctype.from_buffer_copy(raw)
        if isinstance(result, (ctypes.Structure, ctypes.Union, ctypes.Array)):
            return result
        return result.value

    def as_string(self, path: ControlPath) -> str:
        """
        Read ``path`` as a UTF-8 string ending at the first NUL (or at the
        end of the buffer when there is none).

        Raises:
            SysctlInvalidEncoding: the bytes before the NUL are not UTF-8
        """
        raw = self.read_raw(path)
        text, _, _ = raw.partition(b"\x00")
        try:
            return text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SysctlInvalidEncoding(f"sysctl {path} is not valid UTF-8: {e}") from e

    def value_for_name(self, ctype: Any, name: str) -> Any:
        return self.as_value(ctype, self.resolve(name))

    def string_for_name(self, name: str) -> str:
        return self.as_string(self.resolve(name))
