"""
winpush - Push an installer to Windows hosts and confirm it over PowerShell remoting

A command-line tool that stages an installer on each listed host through its
administrative share, runs it remotely and waits until a named PowerShell
session configuration answers.
"""
import argparse
import sys

__version__ = "1.0.0"


def main():
    """Main CLI entry point"""
    from winpush.commands import deploy, probe, reset

    parser = argparse.ArgumentParser(
        prog='winpush',
        description='winpush: push-install packages to Windows hosts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  winpush deploy --hosts hosts.csv --installer PowerShell-7.4.1-win-x64.msi
  winpush deploy --config configs/winpush.yaml --strategy marker-file
  winpush probe --hosts hosts.csv --profile PowerShell.7
  winpush reset --config configs/winpush.yaml

The WinRM password is read from $WINPUSH_PASSWORD.
        '''
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Deploy command
    deploy_parser = subparsers.add_parser('deploy', help='Stage, install and confirm on all hosts')
    deploy.setup_parser(deploy_parser)

    # Probe command
    probe_parser = subparsers.add_parser('probe', help='Check which hosts answer on the endpoint')
    probe.setup_parser(probe_parser)

    # Reset command
    reset_parser = subparsers.add_parser('reset', help='Remove install markers from hosts')
    reset.setup_parser(reset_parser)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Dispatch to command handler
    try:
        if args.command == 'deploy':
            sys.exit(deploy.execute(args))
        elif args.command == 'probe':
            sys.exit(probe.execute(args))
        elif args.command == 'reset':
            sys.exit(reset.execute(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
