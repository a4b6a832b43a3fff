"""Core dependency injection infrastructure for winpush.

All external dependencies (filesystem, time, environment, config files,
console output) are abstracted via Protocols with production implementations,
so the deployment logic can be unit tested without touching real hosts.
"""

from winpush.core.protocols import (
    Logger,
    FileSystemService,
    TimeProvider,
    EnvironmentProvider,
    ConfigLoader,
)

from winpush.core.implementations import (
    ConsoleLogger,
    TranscriptLogger,
    RealFileSystemService,
    SystemTimeProvider,
    SystemEnvironmentProvider,
    YamlConfigLoader,
)

__all__ = [
    # Protocols
    "Logger",
    "FileSystemService",
    "TimeProvider",
    "EnvironmentProvider",
    "ConfigLoader",
    # Implementations
    "ConsoleLogger",
    "TranscriptLogger",
    "RealFileSystemService",
    "SystemTimeProvider",
    "SystemEnvironmentProvider",
    "YamlConfigLoader",
]
