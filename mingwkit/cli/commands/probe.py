"""
Probe command implementation.

Reports the toolchain and native library state without installing or
configuring anything.
"""

import logging

from mingwkit.cli.utils import config_from_args, print_error, print_status, safe_print
from mingwkit.config.parser import ConfigError
from mingwkit.core.exceptions import PackageManagerNotFoundError, PlatformMismatchError
from mingwkit.core.platform import require_windows
from mingwkit.toolchain.packages import find_package_manager
from mingwkit.toolchain.prober import EnvironmentProber

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the probe command.

    Returns:
        0 if the compiler runs and the native library was found, 1 otherwise
    """
    try:
        config = config_from_args(args)
    except ConfigError as e:
        print_error("Invalid configuration", str(e))
        return 1

    try:
        require_windows()
    except PlatformMismatchError as e:
        print_error(str(e))
        return 1

    tc = config.toolchain
    if not args.quiet:
        safe_print("🔍 Probing MSYS2 / mingw-w64 build environment...\n")

    toolchain, library = EnvironmentProber(tc, config.native_library).probe()

    print_status(
        "MSYS2",
        tc.root.is_dir(),
        str(tc.root) if tc.root.is_dir() else f"not installed at {tc.root}",
    )

    try:
        pacman = find_package_manager(tc.root)
        print_status("pacman", True, str(pacman))
    except PackageManagerNotFoundError as e:
        print_status("pacman", False, str(e))

    if toolchain.usable:
        print_status("Compiler", True, toolchain.version)
    elif toolchain.installed:
        print_status("Compiler", False, f"{toolchain.compiler_path} does not run")
    else:
        print_status("Compiler", False, f"missing: {toolchain.compiler_path}")

    if library.found:
        print_status(
            "Native library", True, f"{library.link_mode.value} linking from {library.root}"
        )
    else:
        print_status(
            "Native library",
            False,
            f"not found ({library.root or 'location not configured'})",
        )

    healthy = toolchain.usable and library.found
    if healthy:
        logger.info("Environment is ready")
        return 0

    if not args.quiet:
        safe_print("\n💡 Run: mingwkit setup")
    return 1
