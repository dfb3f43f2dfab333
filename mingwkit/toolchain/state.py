"""
Process-local facts gathered and produced during a provisioning run.

Nothing here is persisted; every run probes from scratch.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class LinkMode(Enum):
    """How the native library's artifacts allow it to be linked."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    NONE = "none"


@dataclass
class ToolchainState:
    """
    MSYS2 / mingw-w64 GCC state.

    Attributes:
        installed: Installation root and compiler binary both exist
        compiler_path: Expected compiler binary location
        verified: Compiler answered `--version` with exit code 0
        version: First line of the version output, when verified
    """

    installed: bool
    compiler_path: Path
    verified: bool = False
    version: Optional[str] = None

    @property
    def usable(self) -> bool:
        return self.installed and self.verified


@dataclass
class NativeLibraryState:
    """
    Native library artifacts found under the configured root.

    Attributes:
        found: Either the static or the dynamic artifact set is complete
        link_mode: STATIC wins over DYNAMIC when both sets are present
        root: Directory that was searched (None when unconfigured)
    """

    found: bool
    link_mode: LinkMode
    root: Optional[Path] = None

    @classmethod
    def missing(cls, root: Optional[Path] = None) -> "NativeLibraryState":
        return cls(found=False, link_mode=LinkMode.NONE, root=root)


@dataclass
class EnvironmentPlan:
    """
    Environment assignments for the downstream cgo build.

    Attributes:
        variables: Variable name -> value, in assignment order
        path_prepend: Directories prepended to PATH one after another, so the
            last entry ends up first
        link_mode: Link mode the flags were computed for
    """

    variables: Dict[str, str] = field(default_factory=dict)
    path_prepend: List[Path] = field(default_factory=list)
    link_mode: LinkMode = LinkMode.NONE
