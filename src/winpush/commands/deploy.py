"""Deploy command: push, install and confirm on every listed host."""
from winpush.commands.common import (
    add_common_arguments,
    add_install_arguments,
    make_logger,
    resolve_config,
)
from winpush.core import ConsoleLogger, RealFileSystemService, SystemEnvironmentProvider
from winpush.deploy import (
    ConfigError,
    InputError,
    OrchestratorFactory,
    load_artifact,
    load_targets,
)
from winpush.deploy.orchestrator import STRATEGIES


def setup_parser(parser):
    """Setup argument parser for deploy command"""
    add_common_arguments(parser)
    add_install_arguments(parser)
    parser.add_argument(
        '--strategy',
        choices=STRATEGIES,
        help='fast-path: skip hosts whose endpoint already answers (default); '
             'marker-file: skip hosts holding a completion marker'
    )
    parser.add_argument(
        '--attempts',
        type=int,
        help='Probe attempts when confirming an install (default: 15)'
    )
    parser.add_argument(
        '--precheck-attempts',
        type=int,
        help='Probe attempts for the fast-path "already installed" check (default: 1)'
    )
    parser.add_argument(
        '--interval',
        type=float,
        help='Seconds to wait before each probe (default: 1)'
    )
    parser.add_argument(
        '--no-wait',
        action='store_true',
        help='Fire-and-forget the installer instead of waiting for it to exit'
    )
    parser.add_argument(
        '--report-dir',
        help='Directory for the failure report (default: reports)'
    )


def execute(args):
    """Execute deploy command"""
    fs = RealFileSystemService()

    try:
        config = resolve_config(args, fs, SystemEnvironmentProvider())
    except ConfigError as e:
        ConsoleLogger().error(str(e))
        return 1

    log = make_logger(config, fs, verbose=args.verbose)
    log.info("=" * 80)
    log.info("winpush Deployment")
    log.info("=" * 80)

    try:
        if not config.hosts_file:
            raise InputError("No host list given (use --hosts or hosts.file in the config)")
        if not config.installer:
            raise InputError("No installer given (use --installer or installer.path in the config)")
        targets = load_targets(config.hosts_file, config.host_column, fs, config.delimiter)
        artifact = load_artifact(config.installer, fs)
    except InputError as e:
        log.error(str(e))
        return 1

    plan = config.plan
    log.info(f"Installer: {artifact.name}")
    log.info(f"Targets:   {len(targets)} (from {config.hosts_file})")
    log.info(f"Endpoint:  {plan.endpoint_profile}")
    log.info(f"Strategy:  {plan.strategy}")
    log.info("")

    orchestrator = OrchestratorFactory.from_config(config, log, filesystem=fs)
    summary = orchestrator.run(targets, artifact)

    return 0 if summary.success else 1
