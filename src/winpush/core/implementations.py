"""Production implementations of dependency injection protocols.

This module provides real implementations that wrap actual external dependencies
(filesystem, time, environment, YAML). These are used in production code.

For testing, use mocks or test doubles instead of these implementations.
"""

import os
import shutil
import sys
import time
import yaml
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional, Union


class ConsoleLogger:
    """Production logger that prints to console (stdout/stderr)."""

    def __init__(self, show_debug: bool = True):
        self.show_debug = show_debug

    def info(self, message: str) -> None:
        """Print info message to stdout."""
        print(message)

    def warning(self, message: str) -> None:
        """Print warning message to stdout."""
        print(f"Warning: {message}")

    def error(self, message: str) -> None:
        """Print error message to stderr."""
        print(f"Error: {message}", file=sys.stderr)

    def debug(self, message: str) -> None:
        """Print debug message to stdout (unless suppressed)."""
        if self.show_debug:
            print(f"Debug: {message}")


class TranscriptLogger:
    """Logger that echoes to another logger and appends to a transcript file.

    Every line is prefixed with a local timestamp and level so a run can be
    audited after the console is gone.
    """

    def __init__(
        self,
        path: Union[str, Path],
        filesystem: 'RealFileSystemService',
        echo: Optional[Any] = None,
        debug_enabled: bool = False
    ):
        self.path = str(path)
        self.fs = filesystem
        self.echo = echo if echo is not None else ConsoleLogger(show_debug=debug_enabled)
        self.debug_enabled = debug_enabled

        parent = Path(self.path).parent
        if str(parent) not in ('', '.'):
            self.fs.mkdir(parent)

    def _write(self, level: str, message: str) -> None:
        stamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        self.fs.append_file(self.path, f"{stamp} [{level}] {message}\n")

    def info(self, message: str) -> None:
        self.echo.info(message)
        self._write('INFO', message)

    def warning(self, message: str) -> None:
        self.echo.warning(message)
        self._write('WARN', message)

    def error(self, message: str) -> None:
        self.echo.error(message)
        self._write('ERROR', message)

    def debug(self, message: str) -> None:
        if not self.debug_enabled:
            return
        self.echo.debug(message)
        self._write('DEBUG', message)


class RealFileSystemService:
    """Production filesystem service using real pathlib and shutil operations."""

    def exists(self, path: Union[str, Path]) -> bool:
        """Check if path exists."""
        return Path(path).exists()

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        return Path(path).is_file()

    def read_file(self, path: Union[str, Path]) -> str:
        """Read entire file as string."""
        with open(path, 'r') as f:
            return f.read()

    def write_file(self, path: Union[str, Path], content: str) -> None:
        """Write string content to file."""
        with open(path, 'w') as f:
            f.write(content)

    def append_file(self, path: Union[str, Path], content: str) -> None:
        """Append string content to file."""
        with open(path, 'a') as f:
            f.write(content)

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        """Create directory."""
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)

    def copy_file(self, source: Union[str, Path], destination: Union[str, Path]) -> None:
        """Copy file with metadata."""
        shutil.copy2(source, destination)

    def remove(self, path: Union[str, Path]) -> None:
        """Remove a single file."""
        os.remove(path)


class SystemTimeProvider:
    """Production time provider using real time module."""

    def current_time(self) -> float:
        """Get current time in seconds since epoch."""
        return time.time()

    def sleep(self, seconds: float) -> None:
        """Sleep for specified seconds."""
        time.sleep(seconds)


class SystemEnvironmentProvider:
    """Production environment provider using os.environ."""

    def get_environ(self) -> Dict[str, str]:
        """Get copy of environment variables."""
        return dict(os.environ)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a single environment variable."""
        return os.environ.get(name, default)


class YamlConfigLoader:
    """Production config loader using real YAML parser."""

    def __init__(self, filesystem: 'RealFileSystemService'):
        """Initialize with filesystem service for reading files."""
        self.fs = filesystem

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary (empty file -> {})."""
        content = self.fs.read_file(path)
        return yaml.safe_load(content) or {}
