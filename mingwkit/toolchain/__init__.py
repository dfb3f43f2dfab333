"""
Toolchain provisioning for MingwKit.

This module provides:
- Probing of the MSYS2 toolchain and the native library
- MSYS2 installation and mingw-w64 GCC installation via pacman
- Compiler verification
- cgo build environment computation
- The orchestrating state machine
"""

from mingwkit.toolchain.state import (
    LinkMode,
    ToolchainState,
    NativeLibraryState,
    EnvironmentPlan,
)
from mingwkit.toolchain.prober import EnvironmentProber, query_compiler_version
from mingwkit.toolchain.installer import ToolchainInstaller
from mingwkit.toolchain.packages import CompilerInstaller, find_package_manager
from mingwkit.toolchain.verifier import Verifier
from mingwkit.toolchain.environment import (
    EnvironmentConfigurator,
    apply_plan,
    prepend_search_path,
    render_activation_script,
)
from mingwkit.toolchain.orchestrator import Orchestrator, Phase, ProvisionReport

__all__ = [
    "LinkMode",
    "ToolchainState",
    "NativeLibraryState",
    "EnvironmentPlan",
    "EnvironmentProber",
    "query_compiler_version",
    "ToolchainInstaller",
    "CompilerInstaller",
    "find_package_manager",
    "Verifier",
    "EnvironmentConfigurator",
    "apply_plan",
    "prepend_search_path",
    "render_activation_script",
    "Orchestrator",
    "Phase",
    "ProvisionReport",
]
