"""
Locate Cursor's identity files.

Each artifact has an ordered list of candidate locations: the canonical
install layout first, then legacy and alternate layouts. The first
candidate that exists on disk wins; when none exists the canonical one
is returned so that callers can create it.
"""
import os
import platform
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, List, Sequence, Tuple

from utils import DirectoryProvider, PlatformDirectoryProvider

logger = logging.getLogger(__name__)


class ArtifactKind(Enum):
    STORAGE = "storage"
    MACHINE_ID = "machine_id"


# Install directories under the base directory, canonical first
WINDOWS_INSTALL_DIRS: Tuple[str, ...] = (os.path.join("Programs", "cursor"), "cursor")
UNIX_INSTALL_DIRS: Tuple[str, ...] = ("Cursor", ".cursor", "cursor")

ARTIFACT_SUFFIXES = {
    ArtifactKind.STORAGE: ("User", "globalStorage", "storage.json"),
    ArtifactKind.MACHINE_ID: ("machineid",),
}


def default_install_dirs(system: Optional[str] = None) -> Tuple[str, ...]:
    """Install directory names probed on the given platform."""
    system = system or platform.system()
    if system == "Windows":
        return WINDOWS_INSTALL_DIRS
    return UNIX_INSTALL_DIRS


class PathResolver:
    """Resolves an ArtifactKind to a concrete file path.

    Only probes the filesystem; never creates anything.
    """

    def __init__(self, provider: Optional[DirectoryProvider] = None,
                 system: Optional[str] = None,
                 install_dirs: Optional[Sequence[str]] = None):
        self.provider = provider or PlatformDirectoryProvider(system)
        self.system = system or platform.system()
        if install_dirs:
            self.install_dirs = tuple(install_dirs)
        else:
            self.install_dirs = default_install_dirs(self.system)

    def candidates(self, kind: ArtifactKind) -> List[Path]:
        """All candidate paths for kind, in probe order.

        Raises:
            NoBaseDirectory: if the base directory cannot be determined
        """
        base = self.provider.base_dir()
        suffix = ARTIFACT_SUFFIXES[kind]
        return [base.joinpath(install_dir, *suffix) for install_dir in self.install_dirs]

    def resolve(self, kind: ArtifactKind) -> Path:
        candidates = self.candidates(kind)
        for path in candidates:
            if os.path.isfile(path):
                logger.debug(f"Resolved {kind.value} to existing file {path}")
                return path

        logger.debug(f"No existing {kind.value} file, defaulting to {candidates[0]}")
        return candidates[0]

    def storage_path(self) -> Path:
        return self.resolve(ArtifactKind.STORAGE)

    def machine_id_path(self) -> Path:
        return self.resolve(ArtifactKind.MACHINE_ID)
