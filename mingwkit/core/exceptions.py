"""
Centralized exception hierarchy for MingwKit.

Provisioning steps catch these at their boundary and turn them into a
boolean outcome plus a logged message; nothing here is meant to escape
the orchestrator.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class MingwKitError(Exception):
    """Base exception for all MingwKit errors."""

    pass


class PlatformMismatchError(MingwKitError):
    """Raised when provisioning is attempted on a non-Windows host."""

    def __init__(self, os_name: str):
        self.os_name = os_name
        super().__init__(
            f"MingwKit only provisions Windows hosts (detected: {os_name})"
        )


# ============================================================================
# Toolchain-related Exceptions
# ============================================================================


class ToolchainError(MingwKitError):
    """Base exception for toolchain-related errors."""

    pass


class TempResourceLockedError(ToolchainError):
    """Raised when a stale temporary file cannot be removed."""

    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Stale temporary file is locked and cannot be deleted: {path}"
        )


# ============================================================================
# Process / Network Exceptions
# ============================================================================


class ProcessLaunchError(MingwKitError):
    """Raised when a child process cannot be started at all."""

    def __init__(self, command, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to launch {command[0]}: {reason}")


class DownloadError(MingwKitError):
    """Raised when a download fails."""

    pass


# ============================================================================
# Package Manager Exceptions
# ============================================================================


class PackageManagerError(MingwKitError):
    """Base exception for package manager errors."""

    pass


class PackageManagerNotFoundError(PackageManagerError):
    """Package manager executable not found inside the installation."""

    pass


# ============================================================================
# Locking Exceptions
# ============================================================================


class ProvisionLockTimeout(MingwKitError):
    """Raised when another provisioning run holds the lock."""

    pass
