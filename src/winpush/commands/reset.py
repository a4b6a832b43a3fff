"""Reset command: remove install markers so the next marker-file run reinstalls."""
from winpush.commands.common import (
    add_common_arguments,
    add_install_arguments,
    make_logger,
    resolve_config,
)
from winpush.core import ConsoleLogger, RealFileSystemService, SystemEnvironmentProvider
from winpush.deploy import (
    Artifact,
    ConfigError,
    InputError,
    RemoteFileStager,
    StagingError,
    load_targets,
)


def setup_parser(parser):
    """Setup argument parser for reset command"""
    add_common_arguments(parser)
    add_install_arguments(parser)


def execute(args):
    """Execute reset command"""
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
        if not config.installer:
            raise InputError("No installer given (use --installer or installer.path in the config)")
        targets = load_targets(config.hosts_file, config.host_column, fs, config.delimiter)
        # Only the file name is needed to find the marker
        artifact = Artifact.from_path(config.installer)
    except InputError as e:
        log.error(str(e))
        return 1

    stager = RemoteFileStager(fs, log)
    folder = config.plan.destination_folder
    removed = 0
    errors = 0

    for target in targets:
        try:
            if stager.remove_marker(target, artifact, folder):
                removed += 1
                log.info(f"  Removed marker on {target}")
            else:
                log.info(f"  No marker on {target}")
        except StagingError as e:
            errors += 1
            log.error(f"{target}: {e}")

    log.info("")
    log.info(f"Markers removed: {removed}/{len(targets)}")
    return 1 if errors else 0
