"""Probe command: report which hosts answer on an endpoint profile.

Read-only: nothing is staged or installed.
"""
from winpush.commands.common import add_common_arguments, make_logger, resolve_config
from winpush.core import ConsoleLogger, RealFileSystemService, SystemEnvironmentProvider
from winpush.deploy import ConfigError, InputError, OrchestratorFactory, load_targets


def setup_parser(parser):
    """Setup argument parser for probe command"""
    add_common_arguments(parser)
    parser.add_argument(
        '--attempts',
        dest='probe_attempts',
        type=int,
        default=1,
        help='Probe attempts per host (default: 1)'
    )
    parser.add_argument(
        '--interval',
        type=float,
        help='Seconds to wait before each probe (default: 1)'
    )


def execute(args):
    """Execute probe command"""
    fs = RealFileSystemService()

    try:
        config = resolve_config(args, fs, SystemEnvironmentProvider())
    except ConfigError as e:
        ConsoleLogger().error(str(e))
        return 1

    log = make_logger(config, fs, verbose=args.verbose)

    try:
        if not config.hosts_file:
            raise InputError("No host list given (use --hosts or hosts.file in the config)")
        targets = load_targets(config.hosts_file, config.host_column, fs, config.delimiter)
    except InputError as e:
        log.error(str(e))
        return 1

    if args.probe_attempts < 1:
        log.error(f"--attempts must be >= 1, got {args.probe_attempts}")
        return 1

    profile = config.plan.endpoint_profile
    poller = OrchestratorFactory.poller(config, log)

    log.info(f"Probing {len(targets)} host(s) on '{profile}'")
    unreachable = []
    for target in targets:
        result = poller.poll(target, profile, args.probe_attempts)
        if result.ready:
            log.info(f"  ✓ {target}")
        else:
            unreachable.append(target)
            log.info(f"  ✗ {target}: {result.last_error}")

    log.info("")
    log.info(f"Answering: {len(targets) - len(unreachable)}/{len(targets)}")
    return 1 if unreachable else 0
