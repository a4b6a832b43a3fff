"""
AvailabilityPoller - Bounded fixed-interval retry around a session probe.

The probe targets a named endpoint profile (PowerShell session
configuration), so success means the freshly installed version answers,
not merely that the host is up.

Backoff: the poller sleeps `interval` seconds before every attempt,
including the first. The expected wait is a service restart window, so the
interval is fixed (no exponential growth, no jitter).
"""

from typing import Optional

from winpush.core.protocols import Logger, TimeProvider
from winpush.deploy.base import PollResult, RemoteExecutor
from winpush.deploy.exceptions import RemoteSessionError

DEFAULT_INTERVAL_SECONDS = 1.0


class AvailabilityPoller:
    """
    Polls a target until its endpoint profile accepts a session.

    State machine: ATTEMPTING -> {SUCCESS, EXHAUSTED}. The caller picks the
    budget: 1 attempt is a cheap "already installed?" check, 15 attempts is
    the post-install confirmation.
    """

    def __init__(
        self,
        executor: RemoteExecutor,
        time_provider: TimeProvider,
        logger: Logger,
        interval: float = DEFAULT_INTERVAL_SECONDS
    ):
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")
        self.executor = executor
        self.time = time_provider
        self.log = logger
        self.interval = interval

    def poll(self, target: str, endpoint_profile: str, max_attempts: int) -> PollResult:
        """
        Probe until success or until max_attempts probes have failed.

        Args:
            target: Host to probe
            endpoint_profile: Session configuration name (e.g., "PowerShell.7")
            max_attempts: Probe budget (>= 1)

        Returns:
            PollResult with ready flag, attempts used and the last error text

        Raises:
            ValueError: If max_attempts < 1
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        last_error: Optional[str] = None
        attempt = 0
        while attempt < max_attempts:
            attempt += 1
            self.time.sleep(self.interval)

            try:
                self.executor.probe(target, endpoint_profile)
            except RemoteSessionError as e:
                last_error = str(e)
                self.log.debug(
                    f"{target}: probe {attempt}/{max_attempts} on '{endpoint_profile}' failed: {e}"
                )
                continue

            return PollResult(target=target, ready=True, attempts=attempt, last_error=last_error)

        return PollResult(target=target, ready=False, attempts=attempt, last_error=last_error)

    def poll_until_ready(self, target: str, endpoint_profile: str, max_attempts: int) -> bool:
        """Boolean form of poll()."""
        return self.poll(target, endpoint_profile, max_attempts).ready
