"""Custom exception hierarchy for git-download-browse."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DownloadBrowseError(Exception):
    """Base error for all custom exceptions."""

    severity = Severity.ERROR


class InvalidReference(DownloadBrowseError):
    """Raised when a string cannot be parsed into a repository reference."""


class AlreadyExists(DownloadBrowseError):
    """Raised when the clone target directory is already present."""

    severity = Severity.WARNING

    def __init__(self, path):
        super().__init__(f"{path} already exists")
        self.path = path


class CommandFailed(DownloadBrowseError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, message: str, command: list[str] | None = None, returncode: int | None = None):
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode


class CloneFailed(CommandFailed):
    """Raised when ``git clone`` fails."""


class ForkCreationFailed(CommandFailed):
    """Raised when ``gh repo fork`` fails."""


class WorktreeCreationFailed(CommandFailed):
    """Raised when ``git worktree add`` fails."""


class MissingDependency(DownloadBrowseError):
    """Raised when a required executable is not on PATH."""


class NoOriginRemote(DownloadBrowseError):
    """Raised when the repository has no ``origin`` remote."""


class UnparsableOrigin(DownloadBrowseError):
    """Raised when the ``origin`` URL is not a recognised GitHub URL."""


class RepoNotFound(DownloadBrowseError):
    """Raised when no working tree can be resolved for an operation."""


class EmptyInput(DownloadBrowseError):
    """Raised when no reference could be obtained from any source."""

    severity = Severity.WARNING


class ResolutionError(DownloadBrowseError):
    """Raised when a detected reference cannot be resolved to a repository."""


class ManifestError(DownloadBrowseError):
    """Raised when a dependency manifest cannot be read or decoded."""


class DirectoryError(DownloadBrowseError):
    """Raised when a configured directory cannot be created."""


class ValidationError(DownloadBrowseError):
    """Raised when user input is invalid."""


class UserAbort(DownloadBrowseError):
    """Raised when the user cancels an interactive flow."""

    severity = Severity.WARNING
