"""
Provisioning state machine.

    START -> PROBED -> TOOLCHAIN_ENSURED | TOOLCHAIN_MISSING
          -> COMPILER_ENSURED | COMPILER_FAILED
          -> VERIFIED | VERIFY_FAILED
          -> CONFIGURED -> REPORTED

A usable toolchain found by the probe skips straight to CONFIGURED.
A failing step clears the cumulative success flag but never stops the
run: every later step still executes so one run reports everything that
is wrong. Step errors are logged and converted to False here; nothing
propagates to the caller.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, MutableMapping, Optional

from mingwkit.config.parser import MingwKitConfig
from mingwkit.core.download import download_file
from mingwkit.core.exceptions import MingwKitError
from mingwkit.core.platform import PlatformInfo, detect_platform
from mingwkit.core.process import CommandResult, run_command
from mingwkit.toolchain.environment import EnvironmentConfigurator, apply_plan
from mingwkit.toolchain.installer import ToolchainInstaller
from mingwkit.toolchain.packages import CompilerInstaller
from mingwkit.toolchain.prober import EnvironmentProber
from mingwkit.toolchain.state import EnvironmentPlan, NativeLibraryState, ToolchainState
from mingwkit.toolchain.verifier import Verifier

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Orchestrator states, in the order a full run visits them."""

    START = "start"
    PROBED = "probed"
    TOOLCHAIN_ENSURED = "toolchain_ensured"
    TOOLCHAIN_MISSING = "toolchain_missing"
    COMPILER_ENSURED = "compiler_ensured"
    COMPILER_FAILED = "compiler_failed"
    VERIFIED = "verified"
    VERIFY_FAILED = "verify_failed"
    CONFIGURED = "configured"
    REPORTED = "reported"


@dataclass
class ProvisionReport:
    """Everything a run found and did."""

    toolchain: Optional[ToolchainState] = None
    library: Optional[NativeLibraryState] = None
    plan: Optional[EnvironmentPlan] = None
    toolchain_ok: bool = False
    success: bool = False
    phases: List[Phase] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


class Orchestrator:
    """Sequence probing, installation, verification and configuration."""

    def __init__(
        self,
        config: MingwKitConfig,
        platform_info: Optional[PlatformInfo] = None,
        runner: Callable[..., CommandResult] = run_command,
        downloader: Callable[..., Path] = download_file,
        environ: Optional[MutableMapping[str, str]] = None,
        temp_dir: Optional[Path] = None,
        force_update: bool = False,
    ):
        """
        Args:
            config: Effective configuration
            platform_info: Host platform (detected when None)
            runner: Command runner shared by all steps
            downloader: Installer download function
            environ: Environment the plan is applied to (default: os.environ)
            temp_dir: Directory for the downloaded installer
            force_update: Run the compiler installer even when already verified
        """
        self.config = config
        self.platform_info = platform_info
        self.environ = os.environ if environ is None else environ
        self.force_update = force_update

        tc = config.toolchain
        lib = config.native_library
        self.prober = EnvironmentProber(tc, lib, runner=runner)
        self.toolchain_installer = ToolchainInstaller(
            tc, runner=runner, downloader=downloader, temp_dir=temp_dir
        )
        self.compiler_installer = CompilerInstaller(
            tc, runner=runner, environ=self.environ
        )
        self.verifier = Verifier(tc, runner=runner)
        self.configurator = EnvironmentConfigurator(tc, lib)

        self.report = ProvisionReport()

    def _enter(self, phase: Phase):
        logger.debug(f"Phase: {phase.value}")
        self.report.phases.append(phase)

    def _fail(self, message: str):
        logger.error(message)
        self.report.failures.append(message)

    def _guarded(self, description: str, step: Callable[[], bool]) -> bool:
        """Run a step, turning any MingwKit/OS error into a failed step."""
        try:
            return step()
        except (MingwKitError, OSError) as e:
            logger.error(f"{description} failed: {e}")
            return False

    def run(self) -> ProvisionReport:
        """Run the whole provisioning flow and return the report."""
        report = self.report
        self._enter(Phase.START)

        platform_info = self.platform_info or detect_platform()
        if not platform_info.is_windows():
            self._fail(
                f"MingwKit only provisions Windows hosts (detected: {platform_info.os})"
            )
            self._enter(Phase.REPORTED)
            return report

        try:
            self._provision()
        except (MingwKitError, OSError) as e:
            self._fail(f"Provisioning aborted: {e}")
            report.success = False

        self._enter(Phase.REPORTED)
        return report

    def _provision(self):
        report = self.report

        logger.info("Probing environment...")
        toolchain_state, library_state = self.prober.probe()
        report.toolchain = toolchain_state
        report.library = library_state
        self._enter(Phase.PROBED)

        if toolchain_state.usable and not self.force_update:
            logger.info(f"Toolchain ready: {toolchain_state.version}")
            report.toolchain_ok = True
        else:
            toolchain_state = self._ensure_toolchain(toolchain_state)
            report.toolchain = toolchain_state

        self._check_library(library_state)

        plan = self.configurator.configure(toolchain_state, library_state)
        apply_plan(plan, self.environ)
        report.plan = plan
        self._enter(Phase.CONFIGURED)

        report.success = report.toolchain_ok and library_state.found

    def _ensure_toolchain(self, state: ToolchainState) -> ToolchainState:
        """Install, repair or update the toolchain, then verify it."""
        settings = self.config.toolchain
        ok = True

        if settings.root.exists():
            self._enter(Phase.TOOLCHAIN_ENSURED)
        else:
            logger.info("Installing MSYS2...")
            if self._guarded("MSYS2 installation", self.toolchain_installer.install_toolchain):
                self._enter(Phase.TOOLCHAIN_ENSURED)
            else:
                self._fail("MSYS2 installation failed")
                self._enter(Phase.TOOLCHAIN_MISSING)
                ok = False

        compiler = settings.compiler_path
        if not compiler.is_file():
            logger.info(f"Installing {settings.compiler_package}...")
            compiler_ok = self._install_compiler()
        elif not state.verified:
            logger.warning(
                f"{compiler} exists but does not run; reinstalling {settings.compiler_package}"
            )
            compiler_ok = self._install_compiler()
        elif self.force_update:
            logger.info(f"Updating {settings.compiler_package}...")
            compiler_ok = self._install_compiler()
        else:
            compiler_ok = True
            self._enter(Phase.COMPILER_ENSURED)
        ok = ok and compiler_ok

        logger.info("Verifying compiler...")
        verified = self._guarded("Compiler verification", self.verifier.verify)
        if verified:
            self._enter(Phase.VERIFIED)
        else:
            self._fail(f"Compiler verification failed: {compiler}")
            self._enter(Phase.VERIFY_FAILED)

        self.report.toolchain_ok = ok and verified
        return ToolchainState(
            installed=settings.root.is_dir() and compiler.is_file(),
            compiler_path=compiler,
            verified=verified,
            version=self.verifier.version,
        )

    def _install_compiler(self) -> bool:
        if self._guarded("Compiler installation", self.compiler_installer.install_compiler):
            self._enter(Phase.COMPILER_ENSURED)
            return True
        self._fail(f"Installing {self.config.toolchain.compiler_package} failed")
        self._enter(Phase.COMPILER_FAILED)
        return False

    def _check_library(self, state: NativeLibraryState):
        lib = self.config.native_library
        if state.found:
            logger.info(
                f"Native library found ({state.link_mode.value} linking) at {state.root}"
            )
            return

        if state.root is None:
            self._fail(
                "Native library location is not configured "
                "(set native_library.root, MINGWKIT_NATIVE_LIB_ROOT or --native-lib-root)"
            )
        else:
            self._fail(
                f"Native library not found under {state.root}: expected {lib.header} with "
                f"{lib.static_archive} (static) or {lib.import_library} + "
                f"{lib.shared_library} (dynamic)"
            )
