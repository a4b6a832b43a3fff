"""Failure report export.

Uses FileSystemService for directory creation, real pandas for the CSV.
"""
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from winpush.core.protocols import FileSystemService
from winpush.deploy.base import FailureRecord

REPORT_COLUMNS = ["Timestamp", "ComputerName", "Error"]


def failures_to_frame(records: List[FailureRecord]) -> pd.DataFrame:
    """Tabulate failure records in processing order."""
    rows = [
        {
            "Timestamp": r.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            "ComputerName": r.target,
            "Error": r.error,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def report_filename(when: datetime) -> str:
    return f"FailedInstalls-{when.strftime('%Y%m%d-%H%M%S')}.csv"


def write_failure_report(
    records: List[FailureRecord],
    report_dir: str,
    filesystem: FileSystemService,
    when: datetime
) -> Optional[str]:
    """Write all failure records to a timestamped CSV in report_dir.

    Args:
        records: Failures accumulated during the run
        report_dir: Directory for the report (created if missing)
        filesystem: Filesystem operations abstraction
        when: Run end time, used in the file name

    Returns:
        Path of the written report, or None if there was nothing to write
    """
    if not records:
        return None

    filesystem.mkdir(report_dir)
    path = str(Path(report_dir) / report_filename(when))
    failures_to_frame(records).to_csv(path, index=False)
    return path
