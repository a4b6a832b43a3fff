"""
OrchestratorFactory - Wire production dependencies from a DeploymentConfig.

Commands build everything through here so that the collaborators of a run
(filesystem, clock, transport, logger) are chosen in exactly one place.
"""

from typing import Optional

from winpush.core import (
    Logger,
    FileSystemService,
    TimeProvider,
    RealFileSystemService,
    SystemTimeProvider,
)
from winpush.deploy.base import RemoteExecutor
from winpush.deploy.orchestrator import DeploymentOrchestrator
from winpush.deploy.poller import AvailabilityPoller
from winpush.deploy.stager import RemoteFileStager
from winpush.deploy.winrm_executor import PSRemoteExecutor


class OrchestratorFactory:
    """Factory for building poller/stager/orchestrator from resolved config."""

    @staticmethod
    def executor(config) -> RemoteExecutor:
        """PSRP executor for the configured WinRM connection."""
        return PSRemoteExecutor(config.connection)

    @staticmethod
    def poller(
        config,
        logger: Logger,
        executor: Optional[RemoteExecutor] = None,
        time_provider: Optional[TimeProvider] = None
    ) -> AvailabilityPoller:
        return AvailabilityPoller(
            executor or OrchestratorFactory.executor(config),
            time_provider or SystemTimeProvider(),
            logger,
            interval=config.retry_interval
        )

    @staticmethod
    def from_config(
        config,
        logger: Logger,
        filesystem: Optional[FileSystemService] = None,
        executor: Optional[RemoteExecutor] = None,
        time_provider: Optional[TimeProvider] = None
    ) -> DeploymentOrchestrator:
        """
        Build a DeploymentOrchestrator.

        Args:
            config: DeploymentConfig from winpush.utils.config
            logger: Logger for progress output
            filesystem: Override filesystem (default: RealFileSystemService)
            executor: Override transport (default: PSRemoteExecutor)
            time_provider: Override clock (default: SystemTimeProvider)

        Example:
            orchestrator = OrchestratorFactory.from_config(config, ConsoleLogger())
            summary = orchestrator.run(targets, artifact)
        """
        fs = filesystem or RealFileSystemService()
        clock = time_provider or SystemTimeProvider()
        remote = executor or OrchestratorFactory.executor(config)

        return DeploymentOrchestrator(
            stager=RemoteFileStager(fs, logger),
            executor=remote,
            poller=OrchestratorFactory.poller(config, logger, executor=remote, time_provider=clock),
            filesystem=fs,
            time_provider=clock,
            logger=logger,
            plan=config.plan
        )
