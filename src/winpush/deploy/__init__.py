"""
Push-install subsystem.

Stages an installer on Windows targets over their administrative shares,
runs it over PowerShell remoting and confirms the install by probing a named
session configuration.

Public API:
    - RemoteExecutor: Protocol interface for dispatch + probe
    - PSRemoteExecutor, ConnectionSettings: pypsrp implementation
    - load_targets, load_artifact: Pre-flight inputs
    - RemoteFileStager: Admin-share staging and marker files
    - AvailabilityPoller: Bounded fixed-interval probe loop
    - DeploymentOrchestrator, DeploymentPlan: Per-target sequencing
    - OrchestratorFactory: Production wiring
    - Value types and exceptions
"""

from .base import (
    Artifact,
    InstallCommand,
    DispatchResult,
    PollResult,
    FailureRecord,
    RunSummary,
    RemoteExecutor,
)
from .exceptions import (
    WinpushError,
    InputError,
    ConfigError,
    DeploymentError,
    StagingError,
    ConfirmationError,
    RemoteSessionError,
)
from .inputs import load_targets, load_artifact
from .stager import RemoteFileStager, admin_share_path
from .poller import AvailabilityPoller
from .orchestrator import (
    DeploymentOrchestrator,
    DeploymentPlan,
    STRATEGY_FAST_PATH,
    STRATEGY_MARKER_FILE,
)
from .report import write_failure_report
from .winrm_executor import PSRemoteExecutor, ConnectionSettings
from .factory import OrchestratorFactory

__all__ = [
    # Protocol and types
    "RemoteExecutor",
    "Artifact",
    "InstallCommand",
    "DispatchResult",
    "PollResult",
    "FailureRecord",
    "RunSummary",

    # Components
    "load_targets",
    "load_artifact",
    "RemoteFileStager",
    "admin_share_path",
    "AvailabilityPoller",
    "DeploymentOrchestrator",
    "DeploymentPlan",
    "STRATEGY_FAST_PATH",
    "STRATEGY_MARKER_FILE",
    "write_failure_report",

    # Transport
    "PSRemoteExecutor",
    "ConnectionSettings",

    # Factory
    "OrchestratorFactory",

    # Exceptions
    "WinpushError",
    "InputError",
    "ConfigError",
    "DeploymentError",
    "StagingError",
    "ConfirmationError",
    "RemoteSessionError",
]
