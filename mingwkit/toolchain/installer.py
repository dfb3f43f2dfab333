"""
MSYS2 base installation.

Downloads the MSYS2 installer and runs it unattended. A present
installation root is taken at face value: partial or corrupt installs
are not detected here (the compiler step and the verifier catch those).
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from mingwkit.config.parser import ToolchainSettings
from mingwkit.core.download import DownloadProgress, download_file
from mingwkit.core.exceptions import MingwKitError, TempResourceLockedError
from mingwkit.core.filesystem import remove_stale_file, safe_unlink, temp_path
from mingwkit.core.process import CommandResult, run_command

logger = logging.getLogger(__name__)


class _ProgressLogger:
    """Log download progress at 10% steps."""

    def __init__(self):
        self.next_mark = 10.0

    def __call__(self, progress: DownloadProgress):
        if progress.total_bytes and progress.percentage >= self.next_mark:
            logger.info(f"  {progress}")
            while self.next_mark <= progress.percentage:
                self.next_mark += 10.0


class ToolchainInstaller:
    """Ensure the MSYS2 distribution exists on disk."""

    def __init__(
        self,
        settings: ToolchainSettings,
        runner: Callable[..., CommandResult] = run_command,
        downloader: Callable[..., Path] = download_file,
        temp_dir: Optional[Path] = None,
    ):
        """
        Args:
            settings: Toolchain settings (root, installer URL, locale)
            runner: Command runner, injectable for tests
            downloader: Download function, injectable for tests
            temp_dir: Where the installer is downloaded (default: system temp)
        """
        self.settings = settings
        self.runner = runner
        self.downloader = downloader
        self.temp_dir = temp_dir

    @property
    def installer_path(self) -> Path:
        if self.temp_dir is not None:
            return Path(self.temp_dir) / self.settings.installer_name
        return temp_path(self.settings.installer_name)

    def installer_args(self, installer: Path) -> List[str]:
        """Command line for an unattended install into the configured root."""
        return [
            str(installer),
            "install",
            "--confirm-command",
            "--accept-messages",
            "--root",
            str(self.settings.root),
            "--locale",
            self.settings.locale,
        ]

    def install_toolchain(self) -> bool:
        """
        Install MSYS2 unless the installation root already exists.

        Returns:
            True if MSYS2 is present afterwards (or was already), False otherwise
        """
        root = self.settings.root
        if root.exists():
            logger.info(f"MSYS2 already installed at {root}")
            return True

        installer = self.installer_path
        try:
            remove_stale_file(installer)
        except TempResourceLockedError as e:
            logger.error(str(e))
            logger.error(
                "Close any running MSYS2 installer (check Task Manager), "
                f"delete {installer} and re-run setup."
            )
            return False

        try:
            return self._download_and_run(installer)
        finally:
            safe_unlink(installer)

    def _download_and_run(self, installer: Path) -> bool:
        logger.info(f"Downloading MSYS2 installer from {self.settings.installer_url}")
        try:
            self.downloader(
                self.settings.installer_url,
                installer,
                progress_callback=_ProgressLogger(),
            )
        except (MingwKitError, OSError, ValueError) as e:
            logger.error(f"Failed to download MSYS2 installer: {e}")
            return False

        logger.info(f"Installing MSYS2 to {self.settings.root} (this may take a while)...")
        try:
            result = self.runner(self.installer_args(installer))
        except MingwKitError as e:
            logger.error(f"Failed to run MSYS2 installer: {e}")
            return False

        if not result.ok:
            logger.error(f"MSYS2 installer exited with code {result.returncode}")
            return False

        logger.info(f"MSYS2 installed at {self.settings.root}")
        return True
