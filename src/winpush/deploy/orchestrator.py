"""
DeploymentOrchestrator - Sequence stage → invoke → confirm for every target.

Two idempotency strategies:
    fast-path:   probe the endpoint once first; a host that already answers is
                 skipped entirely (no staging, no marker check)
    marker-file: stage, then skip the install if a completion marker from a
                 previous run exists; write the marker after confirmation

Failure policy: anything that goes wrong for one target is caught at the
per-target boundary and becomes a FailureRecord. Only pre-flight input
errors (raised before run() is called) can stop a whole run.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import PureWindowsPath
from typing import List

from winpush.core.protocols import FileSystemService, Logger, TimeProvider
from winpush.deploy.base import (
    Artifact,
    FailureRecord,
    InstallCommand,
    RemoteExecutor,
    RunSummary,
)
from winpush.deploy.exceptions import ConfirmationError, DeploymentError, StagingError
from winpush.deploy.poller import AvailabilityPoller
from winpush.deploy.report import write_failure_report
from winpush.deploy.stager import RemoteFileStager

STRATEGY_FAST_PATH = "fast-path"
STRATEGY_MARKER_FILE = "marker-file"
STRATEGIES = (STRATEGY_FAST_PATH, STRATEGY_MARKER_FILE)

OUTCOME_INSTALLED = "installed"
OUTCOME_SKIPPED = "skipped"

# PowerShell 7 MSI: quiet install, Explorer context menu, PS remoting endpoint,
# event log manifest
DEFAULT_INSTALL_ARGUMENTS = (
    "/quiet",
    "ADD_EXPLORER_CONTEXT_MENU_OPENPOWERSHELL=1",
    "ENABLE_PSREMOTING=1",
    "REGISTER_MANIFEST=1",
)


@dataclass(frozen=True)
class DeploymentPlan:
    """
    What to do on each target.

    Attributes:
        destination_folder: Target-local staging folder
        endpoint_profile: Session configuration that proves the install worked
        install_arguments: Installer flags appended after /i "<package>"
        wait_for_install: Block on the installer (False = fire-and-forget)
        strategy: STRATEGY_FAST_PATH or STRATEGY_MARKER_FILE
        precheck_attempts: Probe budget for the fast-path "already installed?" check
        confirm_attempts: Probe budget for post-install confirmation
        report_dir: Where the failure report goes
    """
    destination_folder: str = "C:\\Temp"
    endpoint_profile: str = "PowerShell.7"
    install_arguments: tuple = DEFAULT_INSTALL_ARGUMENTS
    wait_for_install: bool = True
    strategy: str = STRATEGY_FAST_PATH
    precheck_attempts: int = 1
    confirm_attempts: int = 15
    report_dir: str = "reports"


class DeploymentOrchestrator:
    """Runs a DeploymentPlan across targets, one at a time."""

    def __init__(
        self,
        stager: RemoteFileStager,
        executor: RemoteExecutor,
        poller: AvailabilityPoller,
        filesystem: FileSystemService,
        time_provider: TimeProvider,
        logger: Logger,
        plan: DeploymentPlan
    ):
        if plan.strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy '{plan.strategy}' (expected one of {STRATEGIES})")
        self.stager = stager
        self.executor = executor
        self.poller = poller
        self.fs = filesystem
        self.time = time_provider
        self.log = logger
        self.plan = plan

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.time.current_time())

    def install_command(self, artifact: Artifact) -> InstallCommand:
        """Installer invocation with the target-local package path baked in."""
        package_path = str(PureWindowsPath(self.plan.destination_folder) / artifact.name)
        return InstallCommand(
            package_path=package_path,
            arguments=tuple(self.plan.install_arguments),
            wait=self.plan.wait_for_install
        )

    def deploy_target(self, target: str, artifact: Artifact) -> str:
        """
        Deploy to a single target.

        Returns:
            OUTCOME_INSTALLED or OUTCOME_SKIPPED

        Raises:
            StagingError: Copy or marker check failed
            ConfirmationError: Endpoint never answered after install
        """
        plan = self.plan

        if plan.strategy == STRATEGY_FAST_PATH:
            if self.poller.poll_until_ready(target, plan.endpoint_profile, plan.precheck_attempts):
                self.log.info(f"  Already answering on '{plan.endpoint_profile}', skipping")
                return OUTCOME_SKIPPED

        self.stager.stage(target, artifact, plan.destination_folder)

        if plan.strategy == STRATEGY_MARKER_FILE:
            if self.stager.has_marker(target, artifact, plan.destination_folder):
                self.log.info("  Install marker present, skipping")
                return OUTCOME_SKIPPED

        command = self.install_command(artifact)
        self.log.info(f"  Running {command.executable} {command.command_line()}")
        dispatch = self.executor.invoke(target, command)
        if dispatch.acknowledged:
            self.log.info(f"  Installer dispatched ({dispatch.detail})")
        else:
            self.log.warning(
                f"{target}: dispatch not confirmed ({dispatch.detail}), checking endpoint anyway"
            )

        result = self.poller.poll(target, plan.endpoint_profile, plan.confirm_attempts)
        if not result.ready:
            message = (
                f"'{plan.endpoint_profile}' did not answer after {result.attempts} attempts"
            )
            if result.last_error:
                message += f": {result.last_error}"
            raise ConfirmationError(message, target=target)

        if plan.strategy == STRATEGY_MARKER_FILE:
            try:
                self.stager.write_marker(target, artifact, plan.destination_folder, self._now())
            except StagingError as e:
                self.log.warning(
                    f"{target}: installed, but marker not written; "
                    f"next marker-file run will reinstall ({e})"
                )

        self.log.info(f"  ✓ Installed, '{plan.endpoint_profile}' answering after {result.attempts} attempt(s)")
        return OUTCOME_INSTALLED

    def run(self, targets: List[str], artifact: Artifact) -> RunSummary:
        """
        Deploy to every target and export failures.

        Args:
            targets: Deduplicated host list (see load_targets)
            artifact: Installer to push

        Returns:
            RunSummary with installed/skipped/failed targets and report path
        """
        summary = RunSummary()
        total = len(targets)

        for index, target in enumerate(targets, 1):
            self.log.info(f"[{index}/{total}] {target}")
            try:
                outcome = self.deploy_target(target, artifact)
            except DeploymentError as e:
                self._record_failure(summary, target, str(e))
                continue
            except Exception as e:
                self._record_failure(summary, target, f"{type(e).__name__}: {e}")
                continue

            if outcome == OUTCOME_SKIPPED:
                summary.skipped.append(target)
            else:
                summary.installed.append(target)

        self._finish(summary)
        return summary

    def _record_failure(self, summary: RunSummary, target: str, error: str) -> None:
        self.log.error(f"{target}: {error}")
        summary.failures.append(FailureRecord(timestamp=self._now(), target=target, error=error))

    def _finish(self, summary: RunSummary) -> None:
        self.log.info("")
        self.log.info(
            f"Installed: {len(summary.installed)}  "
            f"Skipped: {len(summary.skipped)}  "
            f"Failed: {len(summary.failures)}"
        )

        if not summary.failures:
            self.log.info("All targets deployed successfully")
            return

        try:
            summary.report_path = write_failure_report(
                summary.failures, self.plan.report_dir, self.fs, self._now()
            )
        except OSError as e:
            self.log.error(f"Could not write failure report to {self.plan.report_dir}: {e}")
            return

        self.log.warning(
            f"{len(summary.failures)} target(s) failed, report written to {summary.report_path}"
        )
