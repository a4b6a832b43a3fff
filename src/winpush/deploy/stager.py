"""
RemoteFileStager - Copy the installer to a target over its administrative share.

Path convention: C:\\Temp on host PC01 is reached as \\\\PC01\\C$\\Temp.
The check-then-copy is not atomic; targets are processed sequentially so
two stagers never race on the same host.
"""

from datetime import datetime
from pathlib import PureWindowsPath

from winpush.core.protocols import FileSystemService, Logger
from winpush.deploy.base import Artifact
from winpush.deploy.exceptions import StagingError

MARKER_SUFFIX = ".installed"


def admin_share_path(target: str, folder: str) -> str:
    """
    Translate a target-local Windows path into its administrative share UNC path.

    Args:
        target: Host name or address (e.g., "PC01")
        folder: Absolute drive path on the target (e.g., "C:\\Temp\\Installers")

    Returns:
        UNC path (e.g., "\\\\PC01\\C$\\Temp\\Installers")

    Raises:
        ValueError: If folder has no drive letter
    """
    local = PureWindowsPath(folder)
    if not local.drive.endswith(":") or not local.root:
        raise ValueError(f"Staging folder must be an absolute drive path, got: {folder}")

    share = local.drive.replace(":", "$")
    rest = local.parts[1:]
    return str(PureWindowsPath(f"\\\\{target}\\{share}\\", *rest))


class RemoteFileStager:
    """
    Stages artifacts and marker files on targets.

    All I/O goes through FileSystemService so the same code works against
    real UNC shares or a mocked filesystem in tests.
    """

    def __init__(self, filesystem: FileSystemService, logger: Logger):
        self.fs = filesystem
        self.log = logger

    def staged_path(self, target: str, artifact: Artifact, destination_folder: str) -> str:
        """UNC path the artifact lands at on the target."""
        return str(PureWindowsPath(admin_share_path(target, destination_folder)) / artifact.name)

    def stage(self, target: str, artifact: Artifact, destination_folder: str) -> str:
        """
        Ensure the artifact is present in destination_folder on the target.

        Args:
            target: Host to stage to
            artifact: Local installer
            destination_folder: Target-local folder (e.g., "C:\\Temp")

        Returns:
            UNC path of the staged artifact

        Raises:
            StagingError: If the folder cannot be created or the copy fails
        """
        remote_folder = admin_share_path(target, destination_folder)
        remote_file = self.staged_path(target, artifact, destination_folder)

        try:
            if self.fs.exists(remote_file):
                self.log.info(f"  {artifact.name} already staged on {target}, skipping copy")
                return remote_file

            self.log.info(f"  Copying {artifact.name} to {remote_folder}")
            self.fs.mkdir(remote_folder)
            self.fs.copy_file(artifact.path, remote_file)
        except OSError as e:
            raise StagingError(
                f"Failed to stage {artifact.name} to {remote_folder}: {e}",
                target=target
            ) from e

        return remote_file

    def marker_path(self, target: str, artifact: Artifact, destination_folder: str) -> str:
        """UNC path of the completion marker for this artifact on the target."""
        return str(
            PureWindowsPath(admin_share_path(target, destination_folder))
            / f"{artifact.stem}{MARKER_SUFFIX}"
        )

    def has_marker(self, target: str, artifact: Artifact, destination_folder: str) -> bool:
        try:
            return self.fs.exists(self.marker_path(target, artifact, destination_folder))
        except OSError as e:
            raise StagingError(f"Could not check install marker: {e}", target=target) from e

    def write_marker(
        self,
        target: str,
        artifact: Artifact,
        destination_folder: str,
        timestamp: datetime
    ) -> str:
        """Write the completion marker; content is the install timestamp."""
        path = self.marker_path(target, artifact, destination_folder)
        try:
            self.fs.write_file(path, f"{artifact.name} installed {timestamp.isoformat()}\n")
        except OSError as e:
            raise StagingError(f"Could not write install marker {path}: {e}", target=target) from e
        return path

    def remove_marker(self, target: str, artifact: Artifact, destination_folder: str) -> bool:
        """
        Delete the completion marker.

        Returns:
            True if a marker was removed, False if none existed

        Raises:
            StagingError: If the marker exists but cannot be deleted
        """
        path = self.marker_path(target, artifact, destination_folder)
        try:
            if not self.fs.exists(path):
                return False
            self.fs.remove(path)
        except OSError as e:
            raise StagingError(f"Could not remove install marker {path}: {e}", target=target) from e
        return True
