"""Arguments and wiring shared by all commands."""
import logging

from winpush.core import (
    ConsoleLogger,
    TranscriptLogger,
    YamlConfigLoader,
)
from winpush.utils.config import AUTH_METHODS, load_config


def add_common_arguments(parser):
    """Host list, config file, connection and output options."""
    parser.add_argument(
        '--config', '-c',
        help='YAML config file (CLI options override its values)'
    )
    parser.add_argument(
        '--hosts',
        help='Delimited file listing target hosts'
    )
    parser.add_argument(
        '--column',
        help='Column holding host names (default: ComputerName)'
    )
    parser.add_argument(
        '--profile',
        help='Session configuration to probe (default: PowerShell.7)'
    )
    parser.add_argument(
        '--username', '-u',
        help='WinRM user (password is read from $WINPUSH_PASSWORD)'
    )
    parser.add_argument(
        '--ssl',
        action='store_true',
        default=None,
        help='Connect over HTTPS (port 5986)'
    )
    parser.add_argument(
        '--port',
        type=int,
        help='Override WinRM port'
    )
    parser.add_argument(
        '--auth',
        choices=AUTH_METHODS,
        help='WinRM authentication (default: negotiate)'
    )
    parser.add_argument(
        '--log-file',
        help='Append a timestamped transcript of this run to FILE'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show per-attempt probe failures and transport debug output'
    )


def add_install_arguments(parser):
    """Options describing the installer and where it is staged."""
    parser.add_argument(
        '--installer', '-i',
        help='Installer package to push (e.g., PowerShell-7.4.1-win-x64.msi)'
    )
    parser.add_argument(
        '--destination',
        help='Staging folder on targets (default: C:\\Temp)'
    )


def resolve_config(args, filesystem, env):
    """Build a DeploymentConfig from --config plus whatever flags this command has.

    Raises:
        ConfigError: Invalid file or values
    """
    def opt(name):
        return getattr(args, name, None)

    return load_config(
        opt('config'),
        YamlConfigLoader(filesystem),
        env,
        hosts_file=opt('hosts'),
        host_column=opt('column'),
        installer=opt('installer'),
        destination=opt('destination'),
        endpoint_profile=opt('profile'),
        strategy=opt('strategy'),
        confirm_attempts=opt('attempts'),
        precheck_attempts=opt('precheck_attempts'),
        retry_interval=opt('interval'),
        no_wait=bool(opt('no_wait')),
        report_dir=opt('report_dir'),
        log_file=opt('log_file'),
        username=opt('username'),
        ssl=opt('ssl'),
        port=opt('port'),
        auth=opt('auth'),
    )


def make_logger(config, filesystem, verbose=False):
    """Console logger, or a transcript logger when a log file is configured."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s %(name)s %(levelname)s: %(message)s'
        )

    if config.log_file:
        return TranscriptLogger(config.log_file, filesystem, debug_enabled=verbose)
    return ConsoleLogger(show_debug=verbose)
