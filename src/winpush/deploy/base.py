"""
RemoteExecutor Protocol and deployment value types.

The RemoteExecutor protocol is the seam between orchestration and transport:
the production implementation speaks PSRP over WS-Management, tests pass
fakes. All value types are frozen dataclasses; the only mutable structure is
RunSummary, which the orchestrator owns for the duration of a run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable


DEFAULT_INSTALLER = "msiexec.exe"


@dataclass(frozen=True)
class Artifact:
    """
    Local installer file.

    Attributes:
        path: Full local path
        name: File name with extension (e.g., "PowerShell-7.4.1-win-x64.msi")
        stem: File name without extension (used for the marker name)
    """
    path: str
    name: str
    stem: str

    @classmethod
    def from_path(cls, path: str) -> "Artifact":
        p = Path(path)
        return cls(path=str(p), name=p.name, stem=p.stem)


@dataclass(frozen=True)
class InstallCommand:
    """
    Installer invocation to dispatch on a target.

    Attributes:
        package_path: Path of the staged package as seen by the target (C:\\...)
        arguments: Installer flags (quiet mode, feature properties)
        wait: Block until the installer exits (False = fire-and-forget)
        executable: Program to run on the target
    """
    package_path: str
    arguments: tuple = ()
    wait: bool = True
    executable: str = DEFAULT_INSTALLER

    def command_line(self) -> str:
        """Render the argument string passed to the executable."""
        parts = [f'/i "{self.package_path}"']
        parts.extend(self.arguments)
        return " ".join(parts)


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of a remote dispatch.

    Dispatch over the administrative channel is allowed to report false
    negatives, so this is informational only: the poller decides whether the
    install actually worked.

    Attributes:
        target: Host the command was sent to
        acknowledged: Transport accepted the command (and, when waiting, it ran)
        detail: Exit code, process id or transport error text
    """
    target: str
    acknowledged: bool
    detail: str = ""


@dataclass(frozen=True)
class PollResult:
    """
    Outcome of an availability poll.

    Attributes:
        target: Host that was probed
        ready: Endpoint answered within the budget
        attempts: Number of probes made (1..max_attempts)
        last_error: Text of the last probe failure, if any
    """
    target: str
    ready: bool
    attempts: int
    last_error: Optional[str] = None


@dataclass(frozen=True)
class FailureRecord:
    """One failed target. Never mutated after creation."""
    timestamp: datetime
    target: str
    error: str = ""


@dataclass
class RunSummary:
    """
    Accumulated result of a deployment run.

    Attributes:
        installed: Targets confirmed installed during this run
        skipped: Targets already installed (fast-path probe or marker file)
        failures: One FailureRecord per failed target, in processing order
        report_path: Where the failure report was written (None if not written)
    """
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failures: List[FailureRecord] = field(default_factory=list)
    report_path: Optional[str] = None

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def processed(self) -> int:
        return len(self.installed) + len(self.skipped) + len(self.failures)


@runtime_checkable
class RemoteExecutor(Protocol):
    """
    Interface for remote command dispatch and session probing.

    Implementations:
        - PSRemoteExecutor: PSRP over WS-Management (pypsrp)
    """

    def invoke(self, target: str, command: InstallCommand) -> DispatchResult:
        """
        Dispatch a command on the target.

        Must not raise for transport failures; those are reported through
        DispatchResult.acknowledged=False.
        """
        ...

    def probe(self, target: str, endpoint_profile: str) -> None:
        """
        Open and immediately close a session on the named endpoint profile.

        Raises:
            RemoteSessionError: If the session could not be established
        """
        ...
