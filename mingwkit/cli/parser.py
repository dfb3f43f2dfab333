"""
MingwKit CLI argument parser.

This module implements the command-line interface for MingwKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("mingwkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

SHELL_CHOICES = ["powershell", "cmd", "bash"]


class CLI:
    """MingwKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="mingwkit",
            description="MingwKit - MSYS2/mingw-w64 build environment bootstrapper",
            epilog='Use "mingwkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"MingwKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./mingwkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )
        parser.add_argument(
            "--msys2-root",
            type=Path,
            metavar="PATH",
            help="MSYS2 installation root (default: C:/msys64)",
        )
        parser.add_argument(
            "--native-lib-root",
            type=Path,
            metavar="PATH",
            help="Directory holding the native library header and binaries",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_setup_command(subparsers)
        self._add_probe_command(subparsers)
        self._add_env_command(subparsers)

        return parser

    def _add_setup_command(self, subparsers):
        """Add 'setup' subcommand."""
        parser = subparsers.add_parser(
            "setup",
            help="Install, verify and configure the toolchain",
            description=(
                "Install MSYS2 and mingw-w64 GCC if needed, verify the compiler, "
                "locate the native library and configure the cgo environment"
            ),
        )
        parser.add_argument(
            "--update",
            action="store_true",
            help="Update the compiler packages even if the toolchain already works",
        )
        parser.add_argument(
            "--env-file",
            type=Path,
            metavar="PATH",
            help="Write an activation script for the configured environment",
        )
        parser.add_argument(
            "--shell",
            choices=SHELL_CHOICES,
            metavar="SHELL",
            help="Activation script flavour (powershell|cmd|bash) "
            "[default: from --env-file extension, else powershell]",
        )

    def _add_probe_command(self, subparsers):
        """Add 'probe' subcommand."""
        subparsers.add_parser(
            "probe",
            help="Report toolchain and native library state",
            description="Report toolchain and native library state without changing anything",
        )

    def _add_env_command(self, subparsers):
        """Add 'env' subcommand."""
        parser = subparsers.add_parser(
            "env",
            help="Print the cgo environment as a shell script",
            description="Probe the current state and print the build environment "
            "as a script for the given shell (nothing is installed)",
        )
        parser.add_argument(
            "--shell",
            choices=SHELL_CHOICES,
            default="powershell",
            metavar="SHELL",
            help="Script flavour (powershell|cmd|bash) [default: powershell]",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "setup": "mingwkit.cli.commands.setup",
            "probe": "mingwkit.cli.commands.probe",
            "env": "mingwkit.cli.commands.env",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
