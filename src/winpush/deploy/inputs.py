"""Pre-flight input loading: host list and installer artifact.

Uses FileSystemService for existence checks, real pandas for parsing.
Every failure here is an InputError and aborts the run before any
target is touched.
"""
from typing import List

import pandas as pd

from winpush.core.protocols import FileSystemService
from winpush.deploy.base import Artifact
from winpush.deploy.exceptions import InputError


def load_targets(
    path: str,
    column: str,
    filesystem: FileSystemService,
    delimiter: str = ","
) -> List[str]:
    """Load the target host list from a delimited file.

    Args:
        path: Path to the host list (CSV or other delimited text)
        column: Name of the column holding host names; other columns ignored
        filesystem: Filesystem operations abstraction
        delimiter: Field separator

    Returns:
        Host names, deduplicated case-insensitively (first spelling kept) and
        sorted case-insensitively

    Raises:
        InputError: File missing, column missing, or no hosts after cleanup
    """
    if not filesystem.exists(path):
        raise InputError(f"Host list not found: {path}")

    try:
        # Host names like NA or NULL are real names, not missing values
        df = pd.read_csv(
            path,
            sep=delimiter,
            dtype=str,
            skipinitialspace=True,
            encoding='utf-8-sig',
            keep_default_na=False,
            na_filter=False
        )
    except pd.errors.EmptyDataError:
        raise InputError(f"Host list is empty: {path}")
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise InputError(f"Could not parse host list {path}: {e}") from e

    # Excel exports pad header cells
    df.columns = [str(c).strip() for c in df.columns]

    if column not in df.columns:
        raise InputError(
            f"Column '{column}' not found in {path}\n"
            f"Available columns: {', '.join(df.columns) or '(none)'}"
        )

    hosts = df[column].dropna().map(str.strip)
    hosts = hosts[hosts != ""]

    unique = {}
    for host in hosts:
        unique.setdefault(host.lower(), host)

    targets = sorted(unique.values(), key=str.lower)
    if not targets:
        raise InputError(f"No hosts found in column '{column}' of {path}")

    return targets


def load_artifact(path: str, filesystem: FileSystemService) -> Artifact:
    """Resolve the installer artifact, failing if it does not exist."""
    if not filesystem.is_file(path):
        raise InputError(f"Installer not found: {path}")
    return Artifact.from_path(path)
