"""
Env command implementation.

Prints the cgo build environment for the current state as a script the
calling shell can evaluate, e.g. in PowerShell:

    mingwkit env | Out-String | Invoke-Expression
"""

import logging

from mingwkit.cli.utils import config_from_args, print_error
from mingwkit.config.parser import ConfigError
from mingwkit.core.exceptions import PlatformMismatchError
from mingwkit.core.platform import require_windows
from mingwkit.toolchain.environment import (
    EnvironmentConfigurator,
    render_activation_script,
)
from mingwkit.toolchain.prober import EnvironmentProber

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the env command.

    Returns:
        0 if the printed environment is complete, 1 otherwise
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

    toolchain, library = EnvironmentProber(
        config.toolchain, config.native_library
    ).probe()

    if not toolchain.usable:
        logger.warning(f"Compiler not usable: {toolchain.compiler_path}")
    if not library.found:
        logger.warning("Native library not found; no library flags emitted")

    plan = EnvironmentConfigurator(config.toolchain, config.native_library).configure(
        toolchain, library
    )
    print(render_activation_script(plan, args.shell), end="")

    return 0 if toolchain.usable and library.found else 1
