"""
    Shared utility functions for system information retrieval.
"""
import platform


def get_system_info():
    """Retrieve basic system information."""
    system_info = {
        "os": platform.system(),
        "os_version": platform.mac_ver()[0] or platform.version(),
        "machine": platform.machine(),
        "processor": platform.processor(),
        "hostname": platform.node(),
    }
    return system_info


def clean_os_version(version_string: str) -> str:
    """'Version 14.1 (Build 23B74)' -> '14.1 (23B74)'"""
    return version_string.replace("Version ", "").replace("Build ", "")


def get_os_version() -> str:
    """
        macOS version as shown by NSProcessInfo, without the "Version"/"Build" labels.
    """
    import Foundation

    raw = Foundation.NSProcessInfo.processInfo().operatingSystemVersionString()
    return clean_os_version(str(raw))
