"""YAML configuration parser for MingwKit.

This module provides parsing and validation for mingwkit.yaml configuration
files, plus the environment-variable and command-line overrides layered on
top of it.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "mingwkit.yaml"

MSYS2_INSTALLER_URL = (
    "https://github.com/msys2/msys2-installer/releases/download/"
    "nightly-x86_64/msys2-x86_64-latest.exe"
)

ENV_MSYS2_ROOT = "MINGWKIT_MSYS2_ROOT"
ENV_NATIVE_LIB_ROOT = "MINGWKIT_NATIVE_LIB_ROOT"


class ConfigError(Exception):
    """Configuration parsing or validation error."""

    pass


@dataclass
class ToolchainSettings:
    """Where MSYS2 lives and what to install into it."""

    root: Path = Path("C:/msys64")
    installer_url: str = MSYS2_INSTALLER_URL
    installer_name: str = "msys2-x86_64-latest.exe"
    locale: str = "en"
    msystem: str = "MINGW64"
    compiler_package: str = "mingw-w64-x86_64-gcc"
    base_packages: List[str] = field(default_factory=lambda: ["base-devel"])
    compiler: str = "mingw64/bin/gcc.exe"  # relative to root
    compiler_name: str = "x86_64-w64-mingw32-gcc"

    @property
    def compiler_path(self) -> Path:
        return self.root / self.compiler

    @property
    def compiler_dir(self) -> Path:
        return self.compiler_path.parent


@dataclass
class NativeLibrarySettings:
    """Pre-built native library the downstream cgo build links against."""

    root: Optional[Path] = None
    name: str = "duckdb"
    header: str = "duckdb.h"
    import_library: str = "duckdb.lib"
    shared_library: str = "duckdb.dll"
    static_archive: str = "libduckdb_static.a"
    static_define: str = "DUCKDB_STATIC_BUILD"
    # Windows libraries the static archive depends on:
    # networking, sockets, restart manager, C++ runtime, math
    system_libraries: List[str] = field(
        default_factory=lambda: ["ws2_32", "wsock32", "rstrtmgr", "stdc++", "m"]
    )

    @property
    def static_link_name(self) -> str:
        """Linker name of the static archive ('libfoo_static.a' -> 'foo_static')."""
        name = self.static_archive
        if name.startswith("lib"):
            name = name[3:]
        if name.endswith(".a"):
            name = name[:-2]
        return name


@dataclass
class MingwKitConfig:
    """Complete MingwKit configuration."""

    version: int = 1
    toolchain: ToolchainSettings = field(default_factory=ToolchainSettings)
    native_library: NativeLibrarySettings = field(
        default_factory=NativeLibrarySettings
    )


def parse_config(config_path: Path) -> MingwKitConfig:
    """
    Parse mingwkit.yaml configuration file.

    Args:
        config_path: Path to mingwkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    return _parse_and_validate(data)


def _parse_and_validate(data: dict) -> MingwKitConfig:
    """Parse and validate configuration data."""
    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    return MingwKitConfig(
        version=data["version"],
        toolchain=_parse_toolchain(_section(data, "toolchain")),
        native_library=_parse_native_library(_section(data, "native_library")),
    )


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return section


def _parse_toolchain(data: dict) -> ToolchainSettings:
    """Parse toolchain section."""
    settings = ToolchainSettings()

    if "root" in data:
        settings.root = Path(_string(data["root"], "toolchain.root"))

    for key in (
        "installer_url",
        "installer_name",
        "locale",
        "msystem",
        "compiler_package",
        "compiler",
        "compiler_name",
    ):
        if key in data:
            setattr(settings, key, _string(data[key], f"toolchain.{key}"))

    if "base_packages" in data:
        settings.base_packages = _string_list(data["base_packages"], "toolchain.base_packages")

    return settings


def _parse_native_library(data: dict) -> NativeLibrarySettings:
    """Parse native_library section."""
    settings = NativeLibrarySettings()

    # Empty or null root means "not configured"
    if data.get("root") is not None and data["root"] != "":
        settings.root = Path(_string(data["root"], "native_library.root"))

    for key in (
        "name",
        "header",
        "import_library",
        "shared_library",
        "static_archive",
        "static_define",
    ):
        if key in data:
            setattr(settings, key, _string(data[key], f"native_library.{key}"))

    if "system_libraries" in data:
        settings.system_libraries = _string_list(
            data["system_libraries"], "native_library.system_libraries"
        )

    return settings


def _string(value, key: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key} must be a non-empty string")
    return value


def _string_list(value, key: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return list(value)


def load_config(
    project_root: Path,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict[str, Optional[Path]]] = None,
) -> MingwKitConfig:
    """
    Build the effective configuration.

    Precedence (lowest to highest): built-in defaults, the config file,
    environment variables, command-line overrides.

    Args:
        project_root: Directory searched for mingwkit.yaml
        config_file: Explicit config file; must exist when given
        environ: Environment to read overrides from (default: os.environ)
        overrides: 'msys2_root' / 'native_lib_root' values from the CLI

    Returns:
        Effective configuration

    Raises:
        ConfigError: If the config file is invalid or an explicit one is missing
    """
    if environ is None:
        environ = os.environ

    if config_file is not None:
        config = parse_config(Path(config_file))
    else:
        default_file = Path(project_root) / DEFAULT_CONFIG_NAME
        if default_file.exists():
            config = parse_config(default_file)
        else:
            logger.debug(f"Config file not found (optional): {default_file}")
            config = MingwKitConfig()

    if environ.get(ENV_MSYS2_ROOT):
        config.toolchain.root = Path(environ[ENV_MSYS2_ROOT])
    if environ.get(ENV_NATIVE_LIB_ROOT):
        config.native_library.root = Path(environ[ENV_NATIVE_LIB_ROOT])

    overrides = overrides or {}
    if overrides.get("msys2_root"):
        config.toolchain.root = Path(overrides["msys2_root"])
    if overrides.get("native_lib_root"):
        config.native_library.root = Path(overrides["native_lib_root"])

    return config
