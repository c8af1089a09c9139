"""
    Report formatting functions
"""
import math

from core.models import AssetReport

GIB = 1024 ** 3
GB = 1_000_000_000


def round_half_away(x: float) -> float:
    """Round to the nearest integer, halves away from zero (not banker's rounding)."""
    return math.copysign(math.floor(abs(x) + 0.5), x)


def round_tenths(x: float) -> float:
    return round_half_away(10 * x) / 10


def format_memory(memory_bytes: int) -> str:
    # RAM is reported in binary gigabytes
    return f"{round_tenths(memory_bytes / GIB)} GB"


def format_storage(storage_bytes: float) -> str:
    # disks are reported in decimal gigabytes
    return f"{round_tenths(storage_bytes / GB)} GB"


def battery_charge(current: float, maximum: float) -> float:
    """round(1000 * current / maximum) / 10, e.g. 4321 / 5000 -> 86.4"""
    return round_half_away(1000 * (current / maximum)) / 10


def format_mac(raw: bytes) -> str:
    """b'\\x3c\\x22\\xfb\\x01\\x02\\x03' -> '3C:22:FB:01:02:03'"""
    return ":".join(f"{b:02X}" for b in raw)


def format_report_lines(report: AssetReport) -> list[str]:
    return [f"{f.name}: {f.value}" for f in report.fields]


def print_report(report: AssetReport) -> None:
    for line in format_report_lines(report):
        print(line)
