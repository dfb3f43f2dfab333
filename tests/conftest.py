"""
Pytest configuration and shared fixtures for MingwKit tests.

Nothing here needs Windows or the network: toolchains and native
libraries are laid out as empty files under tmp_path, and child
processes go through FakeRunner instead of subprocess.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from mingwkit.config.parser import (
    MingwKitConfig,
    NativeLibrarySettings,
    ToolchainSettings,
)
from mingwkit.core.platform import PlatformInfo, clear_platform_cache
from mingwkit.core.process import CommandResult


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require Windows and network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Fake process runner
# ============================================================================


class FakeRunner:
    """
    Stand-in for mingwkit.core.process.run_command.

    Results are chosen per program file name (e.g. 'gcc.exe', 'pacman.exe');
    programs without a registered result exit 0. An optional hook runs
    before the result is returned so tests can simulate side effects such
    as pacman creating the compiler binary.
    """

    def __init__(self):
        self.calls: List[List[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []
        self.results: Dict[str, List[CommandResult]] = {}
        self.hooks: Dict[str, Callable[[List[str]], None]] = {}
        self.errors: Dict[str, Exception] = {}

    def add(self, program: str, returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.results.setdefault(program, []).append(
            CommandResult(args=[], returncode=returncode, stdout=stdout, stderr=stderr)
        )

    def on(self, program: str, hook: Callable[[List[str]], None]):
        self.hooks[program] = hook

    def fail_with(self, program: str, error: Exception):
        self.errors[program] = error

    def calls_to(self, program: str) -> List[List[str]]:
        return [c for c in self.calls if Path(c[0]).name == program]

    def __call__(self, args, env=None) -> CommandResult:
        argv = [str(a) for a in args]
        program = Path(argv[0]).name
        self.calls.append(argv)
        self.envs.append(env)

        if program in self.errors:
            raise self.errors[program]
        if program in self.hooks:
            self.hooks[program](argv)

        queued = self.results.get(program)
        if queued:
            template = queued.pop(0) if len(queued) > 1 else queued[0]
            return CommandResult(
                args=argv,
                returncode=template.returncode,
                stdout=template.stdout,
                stderr=template.stderr,
            )
        return CommandResult(args=argv, returncode=0)


class FakeDownloader:
    """Stand-in for mingwkit.core.download.download_file."""

    def __init__(self, error: Optional[Exception] = None):
        self.calls: List[tuple] = []
        self.error = error

    def __call__(self, url, destination, progress_callback=None, **kwargs) -> Path:
        self.calls.append((url, Path(destination)))
        if self.error:
            raise self.error
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        Path(destination).write_bytes(b"MZ")
        return Path(destination)


GCC_VERSION = "gcc.exe (Rev2, Built by MSYS2 project) 14.2.0\nCopyright (C) 2024\n"


# ============================================================================
# Filesystem layouts
# ============================================================================


def make_toolchain(settings: ToolchainSettings, compiler: bool = True, pacman: bool = True):
    """Lay out an MSYS2 installation under settings.root."""
    settings.root.mkdir(parents=True, exist_ok=True)
    if pacman:
        pacman_path = settings.root / "usr" / "bin" / "pacman.exe"
        pacman_path.parent.mkdir(parents=True, exist_ok=True)
        pacman_path.write_bytes(b"")
    if compiler:
        make_compiler(settings)


def make_compiler(settings: ToolchainSettings):
    settings.compiler_path.parent.mkdir(parents=True, exist_ok=True)
    settings.compiler_path.write_bytes(b"")


def make_native_library(settings: NativeLibrarySettings, static=False, dynamic=False, header=True):
    """Lay out native library artifacts under settings.root."""
    root = settings.root
    root.mkdir(parents=True, exist_ok=True)
    if header:
        (root / settings.header).write_text("/* header */\n")
    if static:
        (root / settings.static_archive).write_bytes(b"!<arch>\n")
    if dynamic:
        (root / settings.import_library).write_bytes(b"")
        (root / settings.shared_library).write_bytes(b"")


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def toolchain_settings(tmp_path: Path) -> ToolchainSettings:
    return ToolchainSettings(root=tmp_path / "msys64")


@pytest.fixture
def library_settings(tmp_path: Path) -> NativeLibrarySettings:
    return NativeLibrarySettings(root=tmp_path / "duckdb")


@pytest.fixture
def config(toolchain_settings, library_settings) -> MingwKitConfig:
    return MingwKitConfig(toolchain=toolchain_settings, native_library=library_settings)


@pytest.fixture
def windows_platform() -> PlatformInfo:
    return PlatformInfo(os="windows")


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo(os="linux")


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging.basicConfig(force=True) calls made by the CLI."""
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    yield
    root.setLevel(level)
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
