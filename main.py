# main.py
# Command line entry point: shows, regenerates or deletes Cursor's device identifiers.
import sys
import argparse
import logging
from typing import List, Optional
from colorama import Fore, Style, init

from logo import print_logo, version
from config import get_config, get_install_dirs, get_log_level, get_process_timeout
from cursor_paths import PathResolver
from error_handler import ErrorHandler, IdentityToolError, error_context
from show_machine_id import show_machine_ids
from reset_machine_id import reset_machine_ids
from delete_machine_id import ConsoleConfirmer, StaticConfirmer, DeleteOutcome, delete_machine_id
from quit_cursor import TerminationOutcome, quit_cursor

# Initialize colorama
init()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

EMOJI = {
    "SUCCESS": "✅",
    "ERROR": "❌",
    "INFO": "ℹ️",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cursor-id-manager",
        description="Manage the device identifier files of the Cursor editor.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {version}")
    parser.add_argument("--config", dest="config_dir", metavar="DIR",
                        help="Directory holding config.ini (default: Documents/.cursor-id-manager)")
    parser.add_argument("--no-logo", action="store_true", help="Do not print the banner.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True
    subparsers.add_parser("ids", help="Show the current device identifiers.")
    subparsers.add_parser("random-ids", help="Generate and write new random device identifiers.")
    delete_parser = subparsers.add_parser("delete", help="Delete the device ID file (a backup is kept).")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")
    kill_parser = subparsers.add_parser("kill", help="Terminate all running Cursor processes.")
    kill_parser.add_argument("--method", choices=("psutil", "command"),
                             help="Termination mechanism (default: from config).")
    return parser


def configure_logging(level: int, verbose: bool) -> None:
    logging.getLogger().setLevel(logging.DEBUG if verbose else level)


def run_command(args: argparse.Namespace, config) -> int:
    resolver = PathResolver(install_dirs=get_install_dirs(config))

    if args.command == "ids":
        show_machine_ids(resolver)
        return 0

    if args.command == "random-ids":
        report = reset_machine_ids(resolver)
        if report.storage_recovered:
            print(f"{Fore.YELLOW}{EMOJI['INFO']} Malformed storage.json was replaced; "
                  f"see backup {report.storage_backup}{Style.RESET_ALL}")
        return 0

    if args.command == "delete":
        confirmer = StaticConfirmer(True) if args.yes else ConsoleConfirmer()
        report = delete_machine_id(resolver, confirmer)
        return 0 if report.outcome != DeleteOutcome.NOT_FOUND else 1

    if args.command == "kill":
        method = args.method or config.get('Process', 'method', fallback='psutil')
        outcome = quit_cursor(
            name=config.get('Process', 'name', fallback='cursor'),
            method=method,
            timeout=get_process_timeout(config),
        )
        return 1 if outcome == TerminationOutcome.ERROR else 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Quiet until config.ini says otherwise
    configure_logging(logging.WARNING, args.verbose)
    config = get_config(args.config_dir)
    configure_logging(get_log_level(config), args.verbose)
    handler = ErrorHandler(config.get('Logging', 'error_log', fallback='') or None)

    if not args.no_logo:
        print_logo()

    try:
        with error_context(handler, {"command": args.command}):
            return run_command(args, config)
    except IdentityToolError as e:
        print(f"{Fore.RED}{EMOJI['ERROR']} {e}{Style.RESET_ALL}")
        return 1
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}{EMOJI['INFO']} Interrupted{Style.RESET_ALL}")
        return 130


if __name__ == "__main__":
    sys.exit(main())
