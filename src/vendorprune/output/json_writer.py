"""JSON output writers for cleanup reports."""

import json
from pathlib import Path

from vendorprune.models.results import CleanupReport


def write_report(report: CleanupReport, output_path: Path) -> None:
    """Write a cleanup report as JSON."""
    data = report.to_dict()

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
