import os
import sys
import platform
import logging
from pathlib import Path
from typing import Optional

from error_handler import NoBaseDirectory

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

def get_actual_home_dir() -> str:
    """Gets the actual user's home directory, even when run with sudo.

    Returns:
        str: Home directory path, or an empty string if it cannot be resolved
    """
    if sys.platform == "linux" and os.environ.get('SUDO_USER'):
        home = os.path.expanduser(f"~{os.environ.get('SUDO_USER')}")
    else:
        home = os.path.expanduser("~")
    # expanduser hands the input back unchanged when no home can be found
    if not home or home.startswith("~"):
        return ""
    return home

def get_user_documents_path() -> str:
    """Get user documents path across different operating systems.

    Returns:
        str: Path to user's Documents directory
    """
    home = get_actual_home_dir() or os.path.abspath('.')
    if platform.system() == "Windows":
        try:
            import winreg
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Shell Folders") as key:
                documents_path, _ = winreg.QueryValueEx(key, "Personal")
                return documents_path
        except Exception as e:
            logger.warning(f"Failed to get Documents path from registry: {e}")
            return os.path.join(home, "Documents")
    elif platform.system() == "Darwin":  # macOS
        return os.path.join(home, "Documents")
    else:  # Linux and other Unix-like systems
        # Check for XDG user directories
        try:
            with open(os.path.join(home, ".config", "user-dirs.dirs"), "r") as f:
                for line in f:
                    if line.startswith("XDG_DOCUMENTS_DIR"):
                        path = line.split("=")[1].strip().strip('"').replace("$HOME", home)
                        if os.path.exists(path):
                            return path
        except (FileNotFoundError, IOError):
            pass

        # Fallback to ~/Documents
        return os.path.join(home, "Documents")


class DirectoryProvider:
    """Supplies the per-user root under which the editor keeps its data."""

    def base_dir(self) -> Path:
        raise NotImplementedError


class PlatformDirectoryProvider(DirectoryProvider):
    """Standard per-user locations of the host OS.

    Windows uses the local application data folder, macOS the
    Application Support folder and everything else the XDG config home.
    """

    def __init__(self, system: Optional[str] = None):
        self.system = system or platform.system()

    def base_dir(self) -> Path:
        home = get_actual_home_dir()

        if self.system == "Windows":
            localappdata = os.getenv("LOCALAPPDATA", "")
            if localappdata:
                return Path(localappdata)
            if not home:
                raise NoBaseDirectory("LOCALAPPDATA is not set and no home directory was found")
            logger.warning("LOCALAPPDATA environment variable not found")
            return Path(home) / "AppData" / "Local"

        if not home:
            raise NoBaseDirectory()

        if self.system == "Darwin":
            return Path(home) / "Library" / "Application Support"

        xdg_config = os.getenv("XDG_CONFIG_HOME", "")
        # Relative XDG_CONFIG_HOME values are ignored
        if xdg_config and os.path.isabs(xdg_config) and not os.environ.get('SUDO_USER'):
            return Path(xdg_config)
        return Path(home) / ".config"


class StaticDirectoryProvider(DirectoryProvider):
    """Always answers with a fixed directory."""

    def __init__(self, path):
        self.path = Path(path)

    def base_dir(self) -> Path:
        return self.path
