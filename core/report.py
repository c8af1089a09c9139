import json
from dataclasses import asdict
from pathlib import Path

from core.models import AssetReport


def write_json_report(report: AssetReport, out_path: str | Path) -> Path:
    """Write the collected asset report as pretty-printed JSON and return the path."""
    out_path = Path(out_path).expanduser()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8") as f:
        json.dump(asdict(report), f, indent=2, ensure_ascii=False)

    return out_path
