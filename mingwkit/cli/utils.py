"""
Shared utilities for CLI commands.

Provides configuration loading and operator-facing status output used
across CLI commands.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from mingwkit.config.parser import MingwKitConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================


def config_from_args(args) -> MingwKitConfig:
    """
    Build the effective configuration from parsed CLI arguments.

    Raises:
        ConfigError: If the configuration file is invalid
    """
    return load_config(
        project_root=resolve_project_root(getattr(args, "project_root", None)),
        config_file=getattr(args, "config", None),
        overrides={
            "msys2_root": getattr(args, "msys2_root", None),
            "native_lib_root": getattr(args, "native_lib_root", None),
        },
    )


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()


def shell_for_file(path: Path, default: str = "powershell") -> str:
    """Pick an activation script flavour from a file extension."""
    suffix = path.suffix.lower()
    if suffix == ".ps1":
        return "powershell"
    if suffix in (".bat", ".cmd"):
        return "cmd"
    if suffix in (".sh", ".bash"):
        return "bash"
    return default


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe markers if Unicode symbols can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace("⚠️", "WARNING:")
            .replace("✅", "[OK]")
            .replace("❌", "[ERROR]")
            .replace("🔧", "[SETUP]")
            .replace("🔍", "[PROBE]")
            .replace("💡", "[HINT]")
        )
        print(safe_message, file=file)


def print_status(name: str, passed: bool, message: str):
    """Print one status line marked ✅ or ❌."""
    marker = "✅" if passed else "❌"
    safe_print(f"{marker} {name}: {message}")
