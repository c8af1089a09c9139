import psutil


def get_cpu_info():
    """
        Core counts and clock speeds from psutil.
        Stored in the report's "host" section alongside the asset fields.
    """
    freq = psutil.cpu_freq()  # None on some Apple Silicon machines
    cpu_info = {
        "physical_cores": psutil.cpu_count(logical=False),
        "total_cores": psutil.cpu_count(logical=True),
        "max_frequency": freq.max if freq else None,
        "current_frequency": freq.current if freq else None,
    }
    return cpu_info


def get_memory_total() -> int:
    """Physical memory in bytes, independent of sysctl."""
    return psutil.virtual_memory().total
