"""Configuration management: defaults → YAML file → CLI overrides.

Config file layout (every key optional):

    hosts:
      file: hosts.csv
      column: ComputerName
      delimiter: ","
    installer:
      path: installers/PowerShell-7.4.1-win-x64.msi
      destination: 'C:\\Temp'
      arguments: ["/quiet", "ENABLE_PSREMOTING=1"]
      wait: true
    endpoint:
      profile: PowerShell.7
      precheck_attempts: 1
      confirm_attempts: 15
      retry_interval: 1.0
    strategy: fast-path          # or marker-file
    report_dir: reports
    log_file: logs/winpush.log
    winrm:
      username: CORP\\deployer
      password_env: WINPUSH_PASSWORD
      ssl: false
      port: null
      auth: negotiate
      cert_validation: true

Passwords are never read from the file, only from the environment variable
named by winrm.password_env.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from winpush.core.protocols import ConfigLoader, EnvironmentProvider
from winpush.deploy.exceptions import ConfigError
from winpush.deploy.orchestrator import STRATEGIES, DeploymentPlan
from winpush.deploy.poller import DEFAULT_INTERVAL_SECONDS
from winpush.deploy.stager import admin_share_path
from winpush.deploy.winrm_executor import ConnectionSettings

DEFAULT_PASSWORD_ENV = "WINPUSH_PASSWORD"
AUTH_METHODS = ("negotiate", "kerberos", "ntlm", "credssp", "basic", "certificate")

KNOWN_KEYS = {
    "hosts": {"file", "column", "delimiter"},
    "installer": {"path", "destination", "arguments", "wait"},
    "endpoint": {"profile", "precheck_attempts", "confirm_attempts", "retry_interval"},
    "winrm": {"username", "password_env", "ssl", "port", "auth", "cert_validation",
              "connection_timeout", "operation_timeout", "read_timeout"},
    "strategy": None,
    "report_dir": None,
    "log_file": None,
}


@dataclass
class DeploymentConfig:
    """Fully resolved settings for one run."""
    hosts_file: Optional[str] = None
    host_column: str = "ComputerName"
    delimiter: str = ","
    installer: Optional[str] = None
    log_file: Optional[str] = None
    retry_interval: float = DEFAULT_INTERVAL_SECONDS
    plan: DeploymentPlan = field(default_factory=DeploymentPlan)
    connection: ConnectionSettings = field(default_factory=ConnectionSettings)


def load_config_file(path: Optional[str], loader: ConfigLoader) -> Dict[str, Any]:
    """Load a raw YAML config (empty dict if no path given)."""
    if not path:
        return {}
    try:
        raw = loader.load_yaml(path)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except Exception as e:
        raise ConfigError(f"Could not parse config file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return raw


def apply_overrides(
    raw: Dict[str, Any],
    hosts_file: Optional[str] = None,
    host_column: Optional[str] = None,
    installer: Optional[str] = None,
    destination: Optional[str] = None,
    endpoint_profile: Optional[str] = None,
    strategy: Optional[str] = None,
    confirm_attempts: Optional[int] = None,
    precheck_attempts: Optional[int] = None,
    retry_interval: Optional[float] = None,
    no_wait: bool = False,
    report_dir: Optional[str] = None,
    log_file: Optional[str] = None,
    username: Optional[str] = None,
    ssl: Optional[bool] = None,
    port: Optional[int] = None,
    auth: Optional[str] = None
) -> Dict[str, Any]:
    """Return a copy of raw with CLI overrides applied.

    None means "not given on the command line" and leaves the file value alone.
    """
    config = copy.deepcopy(raw)

    def put(section: Optional[str], key: str, value: Any) -> None:
        if value is None:
            return
        if section is None:
            config[key] = value
            return
        if not isinstance(config.get(section), dict):
            config[section] = {}
        config[section][key] = value

    put("hosts", "file", hosts_file)
    put("hosts", "column", host_column)
    put("installer", "path", installer)
    put("installer", "destination", destination)
    if no_wait:
        put("installer", "wait", False)
    put("endpoint", "profile", endpoint_profile)
    put("endpoint", "confirm_attempts", confirm_attempts)
    put("endpoint", "precheck_attempts", precheck_attempts)
    put("endpoint", "retry_interval", retry_interval)
    put(None, "strategy", strategy)
    put(None, "report_dir", report_dir)
    put(None, "log_file", log_file)
    put("winrm", "username", username)
    put("winrm", "ssl", ssl)
    put("winrm", "port", port)
    put("winrm", "auth", auth)

    return config


def _check_keys(raw: Dict[str, Any]) -> None:
    for key, value in raw.items():
        if key not in KNOWN_KEYS:
            raise ConfigError(f"Unknown config section '{key}'")
        allowed = KNOWN_KEYS[key]
        if allowed is None or value is None:
            continue
        if not isinstance(value, dict):
            raise ConfigError(f"Config section '{key}' must be a mapping")
        unknown = set(value) - allowed
        if unknown:
            raise ConfigError(f"Unknown key(s) in '{key}': {', '.join(sorted(unknown))}")


def _as_int(value: Any, name: str, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if number < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {number}")
    return number


def _as_float(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if number < 0:
        raise ConfigError(f"{name} must be >= 0, got {number}")
    return number


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def build_config(raw: Dict[str, Any], env: EnvironmentProvider) -> DeploymentConfig:
    """Validate a raw config mapping and resolve it into a DeploymentConfig.

    Raises:
        ConfigError: On unknown keys, bad types or out-of-range values
    """
    _check_keys(raw)

    hosts = raw.get("hosts") or {}
    installer = raw.get("installer") or {}
    endpoint = raw.get("endpoint") or {}
    winrm = raw.get("winrm") or {}
    defaults = DeploymentPlan()

    strategy = raw.get("strategy", defaults.strategy)
    if strategy not in STRATEGIES:
        raise ConfigError(f"strategy must be one of {', '.join(STRATEGIES)}, got {strategy!r}")

    destination = str(installer.get("destination", defaults.destination_folder))
    try:
        admin_share_path("localhost", destination)
    except ValueError as e:
        raise ConfigError(f"installer.destination: {e}")

    arguments = installer.get("arguments", defaults.install_arguments)
    if isinstance(arguments, str):
        arguments = arguments.split()
    if not isinstance(arguments, (list, tuple)):
        raise ConfigError("installer.arguments must be a list of strings")

    plan = DeploymentPlan(
        destination_folder=destination,
        endpoint_profile=str(endpoint.get("profile", defaults.endpoint_profile)),
        install_arguments=tuple(str(a) for a in arguments),
        wait_for_install=_as_bool(installer.get("wait", defaults.wait_for_install), "installer.wait"),
        strategy=strategy,
        precheck_attempts=_as_int(
            endpoint.get("precheck_attempts", defaults.precheck_attempts),
            "endpoint.precheck_attempts", 1
        ),
        confirm_attempts=_as_int(
            endpoint.get("confirm_attempts", defaults.confirm_attempts),
            "endpoint.confirm_attempts", 1
        ),
        report_dir=str(raw.get("report_dir", defaults.report_dir)),
    )

    auth = winrm.get("auth", "negotiate")
    if auth not in AUTH_METHODS:
        raise ConfigError(f"winrm.auth must be one of {', '.join(AUTH_METHODS)}, got {auth!r}")

    port = winrm.get("port")
    password_env = winrm.get("password_env", DEFAULT_PASSWORD_ENV)
    connection = ConnectionSettings(
        username=winrm.get("username"),
        password=env.get(password_env) if password_env else None,
        ssl=_as_bool(winrm.get("ssl", False), "winrm.ssl"),
        port=_as_int(port, "winrm.port", 1) if port is not None else None,
        auth=auth,
        cert_validation=_as_bool(winrm.get("cert_validation", True), "winrm.cert_validation"),
        connection_timeout=_as_int(winrm.get("connection_timeout", 30), "winrm.connection_timeout", 1),
        operation_timeout=_as_int(winrm.get("operation_timeout", 20), "winrm.operation_timeout", 1),
        read_timeout=_as_int(winrm.get("read_timeout", 30), "winrm.read_timeout", 1),
    )
    if connection.operation_timeout >= connection.read_timeout:
        raise ConfigError("winrm.operation_timeout must be less than winrm.read_timeout")

    return DeploymentConfig(
        hosts_file=hosts.get("file"),
        host_column=str(hosts.get("column", "ComputerName")),
        delimiter=str(hosts.get("delimiter", ",")),
        installer=installer.get("path"),
        log_file=raw.get("log_file"),
        retry_interval=_as_float(
            endpoint.get("retry_interval", DEFAULT_INTERVAL_SECONDS), "endpoint.retry_interval"
        ),
        plan=plan,
        connection=connection,
    )


def load_config(
    path: Optional[str],
    loader: ConfigLoader,
    env: EnvironmentProvider,
    **overrides: Any
) -> DeploymentConfig:
    """Load YAML (if any), apply CLI overrides and resolve the result."""
    raw = load_config_file(path, loader)
    return build_config(apply_overrides(raw, **overrides), env)
