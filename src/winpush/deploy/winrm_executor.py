"""
PSRemoteExecutor - Dispatch installers and probe endpoints over PowerShell remoting.

Transport: PSRP over WS-Management (pypsrp).
    invoke(): runs a short PowerShell script in the default session
              configuration that starts the installer
    probe():  opens a RunspacePool against a *named* session configuration
              and closes it at once

Dispatch never raises for transport problems. The remote channel is allowed
to report false negatives; the orchestrator only trusts the probe.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pypsrp.client import Client
from pypsrp.powershell import RunspacePool
from pypsrp.wsman import WSMan

from winpush.deploy.base import DispatchResult, InstallCommand
from winpush.deploy.exceptions import RemoteSessionError

logger = logging.getLogger(__name__)

POWERSHELL_RESOURCE_PREFIX = "http://schemas.microsoft.com/powershell/"


@dataclass(frozen=True)
class ConnectionSettings:
    """
    WS-Management connection options shared by dispatch and probe.

    Attributes:
        username: Account with admin rights on targets (None = current Kerberos ticket)
        password: Password for username (never stored in config files)
        ssl: Use HTTPS (port 5986) instead of HTTP (port 5985)
        port: Override the WinRM port
        auth: "negotiate", "kerberos", "ntlm", "credssp", "basic" or "certificate"
        cert_validation: Validate the server certificate when ssl is on
        connection_timeout: Seconds to wait for the TCP connection
        operation_timeout: WS-Man OperationTimeout (must be below read_timeout)
        read_timeout: Seconds to wait for an HTTP response
    """
    username: Optional[str] = None
    password: Optional[str] = None
    ssl: bool = False
    port: Optional[int] = None
    auth: str = "negotiate"
    cert_validation: bool = True
    connection_timeout: int = 30
    operation_timeout: int = 20
    read_timeout: int = 30

    def wsman_kwargs(self) -> Dict[str, Any]:
        kwargs = {
            "username": self.username,
            "password": self.password,
            "ssl": self.ssl,
            "auth": self.auth,
            "cert_validation": self.cert_validation,
            "connection_timeout": self.connection_timeout,
            "operation_timeout": self.operation_timeout,
            "read_timeout": self.read_timeout,
        }
        if self.port is not None:
            kwargs["port"] = self.port
        return kwargs


def endpoint_resource_uri(endpoint_profile: str) -> str:
    """Map a session configuration name to its WS-Man resource URI."""
    if endpoint_profile.startswith(("http://", "https://")):
        return endpoint_profile
    return POWERSHELL_RESOURCE_PREFIX + endpoint_profile


def ps_quote(value: str) -> str:
    """Quote a string as a PowerShell single-quoted literal."""
    return "'" + value.replace("'", "''") + "'"


def build_install_script(command: InstallCommand) -> str:
    """
    Render the PowerShell that launches the installer on the target.

    wait=True:  Start-Process -Wait, prints the exit code
    wait=False: Win32_Process.Create, prints "<ReturnValue> <ProcessId>";
                the process is detached from the WinRM shell's job object so
                it survives the shell closing
    """
    arguments = command.command_line()
    if command.wait:
        return (
            f"$p = Start-Process -FilePath {ps_quote(command.executable)} "
            f"-ArgumentList {ps_quote(arguments)} -Wait -PassThru\n"
            f"$p.ExitCode"
        )

    full_command = f"{command.executable} {arguments}"
    return (
        f"$r = Invoke-CimMethod -ClassName Win32_Process -MethodName Create "
        f"-Arguments @{{ CommandLine = {ps_quote(full_command)} }}\n"
        f"\"$($r.ReturnValue) $($r.ProcessId)\""
    )


class PSRemoteExecutor:
    """
    RemoteExecutor backed by pypsrp.

    A fresh connection is opened for every call; nothing is cached between
    targets.
    """

    def __init__(self, settings: ConnectionSettings):
        self.settings = settings

    def invoke(self, target: str, command: InstallCommand) -> DispatchResult:
        """
        Start the installer on the target.

        Returns:
            DispatchResult; acknowledged=False on any transport or script error
        """
        script = build_install_script(command)
        logger.debug("Dispatching to %s (wait=%s): %s", target, command.wait, script)

        try:
            with Client(target, **self.settings.wsman_kwargs()) as client:
                output, streams, had_errors = client.execute_ps(script)
        except Exception as e:
            logger.debug("Dispatch to %s failed: %s", target, e, exc_info=True)
            return DispatchResult(
                target=target,
                acknowledged=False,
                detail=f"{type(e).__name__}: {e}"
            )

        output = output.strip()
        if had_errors:
            errors = "; ".join(str(err) for err in streams.error) or "PowerShell reported errors"
            return DispatchResult(target=target, acknowledged=False, detail=errors)

        if command.wait:
            return DispatchResult(target=target, acknowledged=True, detail=f"exit code {output}")

        return_value, _, pid = output.partition(" ")
        if return_value != "0":
            return DispatchResult(
                target=target,
                acknowledged=False,
                detail=f"Win32_Process.Create returned {return_value or '(nothing)'}"
            )
        return DispatchResult(target=target, acknowledged=True, detail=f"pid {pid}")

    def probe(self, target: str, endpoint_profile: str) -> None:
        """
        Open and release a runspace pool on the named session configuration.

        Raises:
            RemoteSessionError: If the session could not be established
        """
        resource_uri = endpoint_resource_uri(endpoint_profile)
        try:
            with WSMan(target, **self.settings.wsman_kwargs()) as wsman:
                with RunspacePool(wsman, configuration_name=resource_uri):
                    pass
        except Exception as e:
            logger.debug("Probe of %s on %s failed: %s", target, resource_uri, e, exc_info=True)
            raise RemoteSessionError(
                f"Could not open session on '{endpoint_profile}': {type(e).__name__}: {e}",
                target=target
            ) from e
