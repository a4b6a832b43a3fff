"""
Deployment exceptions.

Custom exceptions for push-install failures with actionable error messages.

Only InputError and ConfigError are fatal to a run. Everything derived from
DeploymentError is scoped to a single target and is converted into a
FailureRecord by the orchestrator.
"""

from typing import Optional


class WinpushError(Exception):
    """Base class for all winpush errors."""
    pass


class InputError(WinpushError):
    """
    Raised before any target is processed when the run cannot start.

    Examples:
        - Host list file not found
        - Required host column missing
        - Host list empty after deduplication
        - Installer artifact not found
    """
    pass


class ConfigError(WinpushError):
    """Raised when the YAML config or CLI overrides are invalid."""
    pass


class DeploymentError(WinpushError):
    """
    Raised when deployment to one target fails at any step.

    Attributes:
        target: Host the failure belongs to (None if not yet known)
    """

    def __init__(self, message: str, target: Optional[str] = None):
        super().__init__(message)
        self.target = target


class StagingError(DeploymentError):
    """
    Raised when the installer cannot be copied to the target's staging folder.

    Examples:
        - Administrative share not reachable
        - Access denied on \\\\host\\C$
        - Disk full on target
    """
    pass


class ConfirmationError(DeploymentError):
    """
    Raised when the availability probe exhausts its attempt budget.

    This is the authoritative "install failed" signal: dispatch status is
    never trusted on its own.
    """
    pass


class RemoteSessionError(DeploymentError):
    """
    Raised by a probe when a remote session cannot be established.

    Consumed by the AvailabilityPoller, which records it and retries.
    """
    pass
