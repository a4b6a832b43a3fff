"""Protocol definitions for dependency injection.

This module defines Protocol-based abstractions for all external dependencies
the deployer touches: console/transcript output, the (remote) filesystem seen
through administrative shares, the clock, the environment and config files.

Protocols use structural typing, so any class implementing these methods
satisfies the Protocol without explicit inheritance. Tests pass Mocks.
"""

from typing import Protocol, Dict, Any, Optional, Union
from pathlib import Path


class Logger(Protocol):
    """Abstraction for logging operations.

    Replaces direct print() statements throughout the codebase.
    """

    def info(self, message: str) -> None:
        """Log informational message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...


class FileSystemService(Protocol):
    """Abstraction for filesystem operations.

    Paths may be local or UNC administrative share paths
    (``\\\\host\\C$\\Temp``); the service does not care which.
    """

    def exists(self, path: Union[str, Path]) -> bool:
        """Check if path exists."""
        ...

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        ...

    def read_file(self, path: Union[str, Path]) -> str:
        """Read entire file as string."""
        ...

    def write_file(self, path: Union[str, Path], content: str) -> None:
        """Write string content to file."""
        ...

    def append_file(self, path: Union[str, Path], content: str) -> None:
        """Append string content to file, creating it if needed."""
        ...

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        """Create directory (with parents if specified)."""
        ...

    def copy_file(self, source: Union[str, Path], destination: Union[str, Path]) -> None:
        """Copy a single file, preserving metadata."""
        ...

    def remove(self, path: Union[str, Path]) -> None:
        """Remove a single file."""
        ...


class TimeProvider(Protocol):
    """Abstraction for time operations.

    Enables deterministic testing of the retry loop and of report timestamps.
    """

    def current_time(self) -> float:
        """Get current time in seconds since epoch."""
        ...

    def sleep(self, seconds: float) -> None:
        """Sleep for specified number of seconds."""
        ...


class EnvironmentProvider(Protocol):
    """Abstraction for environment access (credentials come from here)."""

    def get_environ(self) -> Dict[str, str]:
        """Get copy of environment variables."""
        ...

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a single environment variable."""
        ...


class ConfigLoader(Protocol):
    """Abstraction for configuration file loading.

    Wraps YAML loading to enable testing with mock configurations
    without requiring actual config files.
    """

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file and return parsed dictionary."""
        ...
