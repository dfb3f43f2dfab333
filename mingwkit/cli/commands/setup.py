"""
Setup command implementation.

Runs the full provisioning flow: probe, install MSYS2 and mingw-w64 GCC
when needed, verify the compiler, locate the native library and configure
the cgo build environment.
"""

import logging

from mingwkit.cli.utils import (
    config_from_args,
    print_error,
    print_status,
    safe_print,
    shell_for_file,
)
from mingwkit.config.parser import ConfigError
from mingwkit.core.exceptions import PlatformMismatchError, ProvisionLockTimeout
from mingwkit.core.locking import LockManager
from mingwkit.core.platform import require_windows
from mingwkit.toolchain.environment import render_activation_script
from mingwkit.toolchain.orchestrator import Orchestrator, ProvisionReport

logger = logging.getLogger(__name__)


def print_report(report: ProvisionReport, quiet: bool = False):
    """Print the final status of a provisioning run."""
    toolchain = report.toolchain
    library = report.library

    if toolchain is not None and (not quiet or not report.toolchain_ok):
        print_status(
            "Compiler",
            report.toolchain_ok,
            toolchain.version if report.toolchain_ok else f"not usable ({toolchain.compiler_path})",
        )

    if library is not None and (not quiet or not library.found):
        if library.found:
            message = f"{library.link_mode.value} linking from {library.root}"
        else:
            message = f"not found ({library.root or 'location not configured'})"
        print_status("Native library", library.found, message)

    if report.plan is not None and not quiet:
        for name, value in report.plan.variables.items():
            print(f"   {name}={value}")

    if report.success:
        if not quiet:
            safe_print("\n✅ Build environment is ready")
    else:
        safe_print(f"\n❌ Setup finished with {len(report.failures)} problem(s):")
        for failure in report.failures:
            print(f"   - {failure}")


def run(args) -> int:
    """
    Run the setup command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when the toolchain and native library are both usable)
    """
    quiet = args.quiet

    try:
        config = config_from_args(args)
    except ConfigError as e:
        print_error("Invalid configuration", str(e))
        return 1

    try:
        platform_info = require_windows()
    except PlatformMismatchError as e:
        print_error(str(e))
        return 1

    if not quiet:
        safe_print("🔧 Setting up MSYS2 / mingw-w64 build environment...\n")

    try:
        with LockManager().provision_lock():
            report = Orchestrator(
                config, platform_info=platform_info, force_update=args.update
            ).run()
    except ProvisionLockTimeout as e:
        print_error(str(e))
        return 1

    print_report(report, quiet)

    if args.env_file and report.plan is not None:
        shell = args.shell or shell_for_file(args.env_file)
        args.env_file.write_text(
            render_activation_script(report.plan, shell), encoding="utf-8"
        )
        if not quiet:
            safe_print(f"\n💡 Load the environment into your shell from {args.env_file}")
        logger.info(f"Wrote {shell} activation script: {args.env_file}")

    return report.exit_code
