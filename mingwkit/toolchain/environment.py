"""
Build environment for the downstream cgo build.

EnvironmentConfigurator.configure() is pure: it turns probed state into an
EnvironmentPlan. apply_plan() is the one place that mutates a process
environment. render_activation_script() writes the same plan out for a
parent shell, since a child process cannot change its parent's variables.
"""

import logging
import os
import shlex
from pathlib import Path, PureWindowsPath
from typing import List, MutableMapping, Optional, Union

from mingwkit.config.parser import NativeLibrarySettings, ToolchainSettings
from mingwkit.toolchain.state import (
    EnvironmentPlan,
    LinkMode,
    NativeLibraryState,
    ToolchainState,
)

logger = logging.getLogger(__name__)

SHELLS = ("powershell", "cmd", "bash")

# Library flags a plan may set; whichever a plan leaves out are cleared on apply
LIBRARY_FLAG_VARIABLES = ("CGO_CPPFLAGS", "CGO_CFLAGS", "CGO_LDFLAGS")


class EnvironmentConfigurator:
    """Compute cgo environment variables from probed state."""

    def __init__(
        self, toolchain: ToolchainSettings, native_library: NativeLibrarySettings
    ):
        self.toolchain = toolchain
        self.native_library = native_library

    def configure(
        self, toolchain_state: ToolchainState, library_state: NativeLibraryState
    ) -> EnvironmentPlan:
        """
        Build the environment plan.

        Library flags are only emitted for the link mode the probe confirmed;
        with LinkMode.NONE no library flags are emitted at all.
        """
        plan = EnvironmentPlan(link_mode=library_state.link_mode)
        plan.variables["CGO_ENABLED"] = "1"
        plan.variables["CC"] = self.toolchain.compiler_name

        lib = self.native_library
        root = library_state.root

        if library_state.link_mode is LinkMode.STATIC:
            plan.variables["CGO_CPPFLAGS"] = f"-D{lib.static_define} -I{root}"
            plan.variables["CGO_LDFLAGS"] = " ".join(
                [f"-L{root}", f"-l{lib.static_link_name}"]
                + [f"-l{name}" for name in lib.system_libraries]
            )
        elif library_state.link_mode is LinkMode.DYNAMIC:
            plan.variables["CGO_CFLAGS"] = f"-I{root}"
            plan.variables["CGO_LDFLAGS"] = f"-L{root} -l{lib.name}"

        plan.path_prepend.append(self.toolchain.compiler_dir)
        if library_state.found and root is not None:
            plan.path_prepend.append(root)

        return plan


def prepend_search_path(current: str, directory: Union[str, Path]) -> str:
    """
    Put a directory in front of a PATH-style value.

    The value is returned unchanged if the directory already appears in it.
    """
    directory = str(directory)
    if directory in current:
        return current
    if not current:
        return directory
    return f"{directory}{os.pathsep}{current}"


def apply_plan(
    plan: EnvironmentPlan, environ: Optional[MutableMapping[str, str]] = None
) -> None:
    """
    Write the plan into an environment mapping (default: os.environ).

    Library flag variables the plan does not set are removed, so switching
    link mode never leaves flags from an earlier mode behind.
    """
    if environ is None:
        environ = os.environ

    for name in LIBRARY_FLAG_VARIABLES:
        if name not in plan.variables and name in environ:
            logger.debug(f"Clearing {name}")
            del environ[name]

    for name, value in plan.variables.items():
        logger.debug(f"Setting {name}={value}")
        environ[name] = value

    for directory in plan.path_prepend:
        environ["PATH"] = prepend_search_path(environ.get("PATH", ""), directory)


def _to_msys_path(path: Path) -> str:
    """C:\\msys64\\mingw64\\bin -> /c/msys64/mingw64/bin"""
    win = PureWindowsPath(str(path))
    if win.drive and win.drive.endswith(":"):
        rest = "/".join(win.parts[1:])
        return f"/{win.drive[0].lower()}/{rest}"
    return win.as_posix()


def _powershell_quote(value: str) -> str:
    escaped = value.replace("`", "``").replace('"', '`"').replace("$", "`$")
    return f'"{escaped}"'


def render_activation_script(plan: EnvironmentPlan, shell: str = "powershell") -> str:
    """
    Render the plan as a script a shell can source.

    Args:
        plan: Environment plan
        shell: 'powershell', 'cmd' or 'bash' (MSYS2 / Git Bash)

    Raises:
        ValueError: For an unknown shell
    """
    if shell not in SHELLS:
        raise ValueError(f"Unknown shell: {shell} (expected one of {', '.join(SHELLS)})")

    stale = [name for name in LIBRARY_FLAG_VARIABLES if name not in plan.variables]
    lines: List[str] = []

    if shell == "powershell":
        for name in stale:
            lines.append(f"Remove-Item Env:{name} -ErrorAction SilentlyContinue")
        for name, value in plan.variables.items():
            lines.append(f"$env:{name} = {_powershell_quote(value)}")
        for directory in plan.path_prepend:
            d = _powershell_quote(str(directory))
            lines.append(
                f"if (-not $env:Path.Contains({d})) {{ $env:Path = {d} + ';' + $env:Path }}"
            )
    elif shell == "cmd":
        lines.append("@echo off")
        for name in stale:
            lines.append(f'set "{name}="')
        for name, value in plan.variables.items():
            lines.append(f'set "{name}={value}"')
        for directory in plan.path_prepend:
            lines.append(
                f'echo ;%PATH%; | find /i ";{directory};" >nul '
                f'|| set "PATH={directory};%PATH%"'
            )
    else:
        for name in stale:
            lines.append(f"unset {name}")
        for name, value in plan.variables.items():
            lines.append(f"export {name}={shlex.quote(value)}")
        for directory in plan.path_prepend:
            msys_dir = _to_msys_path(directory)
            lines.append(
                f'case ":$PATH:" in *{shlex.quote(":" + msys_dir + ":")}*) ;; '
                f'*) export PATH={shlex.quote(msys_dir)}:"$PATH" ;; esac'
            )

    return "\n".join(lines) + "\n"
