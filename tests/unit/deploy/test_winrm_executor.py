"""Unit tests for PSRemoteExecutor.

pypsrp classes are patched at the module boundary; no network access.
"""
from unittest.mock import MagicMock, patch

import pytest

from winpush.deploy.base import InstallCommand
from winpush.deploy.exceptions import RemoteSessionError
from winpush.deploy.winrm_executor import (
    ConnectionSettings,
    PSRemoteExecutor,
    build_install_script,
    endpoint_resource_uri,
    ps_quote,
)

MODULE = 'winpush.deploy.winrm_executor'

WAIT_COMMAND = InstallCommand(
    package_path="C:\\Temp\\setup.msi",
    arguments=("/quiet", "ENABLE_PSREMOTING=1"),
    wait=True
)
NOWAIT_COMMAND = InstallCommand(
    package_path="C:\\Temp\\setup.msi",
    arguments=("/quiet",),
    wait=False
)


def configure_client(mock_client_cls, output="", errors=None, had_errors=False):
    """Make `with Client(...) as client` yield a client returning the given execute_ps result."""
    client = mock_client_cls.return_value.__enter__.return_value
    streams = MagicMock()
    streams.error = errors or []
    client.execute_ps.return_value = (output, streams, had_errors)
    return client


class TestHelpers:
    """Test script building and URI mapping."""

    def test_resource_uri_from_profile_name(self):
        assert endpoint_resource_uri("PowerShell.7") == \
            "http://schemas.microsoft.com/powershell/PowerShell.7"

    def test_resource_uri_passthrough(self):
        uri = "http://schemas.microsoft.com/powershell/Microsoft.PowerShell"
        assert endpoint_resource_uri(uri) == uri

    def test_ps_quote_doubles_single_quotes(self):
        assert ps_quote("C:\\O'Brien\\x.msi") == "'C:\\O''Brien\\x.msi'"

    def test_wait_script(self):
        script = build_install_script(WAIT_COMMAND)

        assert "Start-Process -FilePath 'msiexec.exe'" in script
        assert "-ArgumentList '/i \"C:\\Temp\\setup.msi\" /quiet ENABLE_PSREMOTING=1'" in script
        assert "-Wait -PassThru" in script
        assert script.strip().endswith("$p.ExitCode")

    def test_nowait_script_detaches_via_win32_process(self):
        script = build_install_script(NOWAIT_COMMAND)

        assert "Win32_Process" in script
        assert "-Wait" not in script
        assert "msiexec.exe /i \"C:\\Temp\\setup.msi\" /quiet" in script

    def test_wsman_kwargs_omit_unset_port(self):
        kwargs = ConnectionSettings(username="CORP\\deploy", password="pw").wsman_kwargs()

        assert "port" not in kwargs
        assert kwargs["username"] == "CORP\\deploy"
        assert kwargs["ssl"] is False

    def test_wsman_kwargs_include_port(self):
        assert ConnectionSettings(port=5986, ssl=True).wsman_kwargs()["port"] == 5986


class TestInvoke:
    """Test invoke() never raises and reports status explicitly."""

    @patch(f'{MODULE}.Client')
    def test_wait_success(self, mock_client_cls):
        client = configure_client(mock_client_cls, output="0\r\n")
        executor = PSRemoteExecutor(ConnectionSettings(username="u", password="p"))

        result = executor.invoke("PC01", WAIT_COMMAND)

        assert result.acknowledged is True
        assert result.detail == "exit code 0"
        assert mock_client_cls.call_args[0][0] == "PC01"
        assert mock_client_cls.call_args[1]["username"] == "u"
        assert "-Wait" in client.execute_ps.call_args[0][0]

    @patch(f'{MODULE}.Client')
    def test_transport_error_is_not_raised(self, mock_client_cls):
        mock_client_cls.side_effect = ConnectionError("Connection refused")
        executor = PSRemoteExecutor(ConnectionSettings())

        result = executor.invoke("PC01", WAIT_COMMAND)

        assert result.acknowledged is False
        assert "ConnectionError" in result.detail
        assert "Connection refused" in result.detail

    @patch(f'{MODULE}.Client')
    def test_error_during_execution_is_not_raised(self, mock_client_cls):
        client = mock_client_cls.return_value.__enter__.return_value
        client.execute_ps.side_effect = RuntimeError("shell closed")
        executor = PSRemoteExecutor(ConnectionSettings())

        result = executor.invoke("PC01", WAIT_COMMAND)

        assert result.acknowledged is False

    @patch(f'{MODULE}.Client')
    def test_powershell_errors_reported(self, mock_client_cls):
        configure_client(
            mock_client_cls,
            errors=["Start-Process : This command cannot be run"],
            had_errors=True
        )
        executor = PSRemoteExecutor(ConnectionSettings())

        result = executor.invoke("PC01", WAIT_COMMAND)

        assert result.acknowledged is False
        assert "cannot be run" in result.detail

    @patch(f'{MODULE}.Client')
    def test_nowait_success_reports_pid(self, mock_client_cls):
        configure_client(mock_client_cls, output="0 4242\r\n")
        executor = PSRemoteExecutor(ConnectionSettings())

        result = executor.invoke("PC01", NOWAIT_COMMAND)

        assert result.acknowledged is True
        assert result.detail == "pid 4242"

    @patch(f'{MODULE}.Client')
    def test_nowait_create_failure(self, mock_client_cls):
        configure_client(mock_client_cls, output="9 \r\n")
        executor = PSRemoteExecutor(ConnectionSettings())

        result = executor.invoke("PC01", NOWAIT_COMMAND)

        assert result.acknowledged is False
        assert "returned 9" in result.detail


class TestProbe:
    """Test probe() opens and releases a named runspace pool."""

    @patch(f'{MODULE}.RunspacePool')
    @patch(f'{MODULE}.WSMan')
    def test_opens_named_configuration(self, mock_wsman_cls, mock_pool_cls):
        executor = PSRemoteExecutor(ConnectionSettings(ssl=True))

        executor.probe("PC01", "PowerShell.7")

        wsman = mock_wsman_cls.return_value.__enter__.return_value
        mock_wsman_cls.assert_called_once()
        assert mock_wsman_cls.call_args[0][0] == "PC01"
        assert mock_wsman_cls.call_args[1]["ssl"] is True
        mock_pool_cls.assert_called_once_with(
            wsman,
            configuration_name="http://schemas.microsoft.com/powershell/PowerShell.7"
        )
        # Session released immediately
        mock_pool_cls.return_value.__exit__.assert_called_once()
        mock_wsman_cls.return_value.__exit__.assert_called_once()

    @patch(f'{MODULE}.RunspacePool')
    @patch(f'{MODULE}.WSMan')
    def test_failure_raises_remote_session_error(self, mock_wsman_cls, mock_pool_cls):
        mock_pool_cls.return_value.__enter__.side_effect = RuntimeError(
            "The WS-Management service cannot process the request"
        )
        executor = PSRemoteExecutor(ConnectionSettings())

        with pytest.raises(RemoteSessionError) as exc_info:
            executor.probe("PC01", "PowerShell.7")

        assert exc_info.value.target == "PC01"
        assert "PowerShell.7" in str(exc_info.value)

    @patch(f'{MODULE}.WSMan')
    def test_unreachable_host(self, mock_wsman_cls):
        mock_wsman_cls.side_effect = OSError("No route to host")
        executor = PSRemoteExecutor(ConnectionSettings())

        with pytest.raises(RemoteSessionError, match="No route to host"):
            executor.probe("PC01", "PowerShell.7")
