import os
import configparser
import logging
import tempfile
from typing import Optional, Dict, Any, List, Tuple
from colorama import Fore, Style, init

# Initialize colorama
init(autoreset=True)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Import utils after logging setup to avoid circular imports
from utils import get_user_documents_path

# Define emoji constants
EMOJI = {
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "SUCCESS": "✅"
}

CONFIG_DIR_NAME = ".cursor-id-manager"
CONFIG_FILE_NAME = "config.ini"

# Global config cache
_config_cache = None

class ConfigManager:
    """Class to manage configuration operations"""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize ConfigManager

        Args:
            config_dir: Directory holding config.ini; defaults to a folder in the user's Documents
        """
        self.config = configparser.ConfigParser()
        self.config_dir = config_dir
        self.config_file = os.path.join(config_dir, CONFIG_FILE_NAME) if config_dir else None

    def setup_config_directory(self) -> Tuple[str, str]:
        """Setup configuration directory

        Returns:
            Tuple[str, str]: Configuration directory and file paths
        """
        config_dir = self.config_dir
        if not config_dir:
            docs_path = get_user_documents_path()
            if not docs_path or not os.path.exists(docs_path):
                logger.warning("Documents path not found, using current directory")
                docs_path = os.path.abspath('.')
            config_dir = os.path.normpath(os.path.join(docs_path, CONFIG_DIR_NAME))

        try:
            os.makedirs(config_dir, exist_ok=True)
        except OSError as e:
            # If cannot create directory, use temporary directory
            logger.warning(f"Failed to create config directory {config_dir}: {e}")
            config_dir = os.path.normpath(os.path.join(tempfile.gettempdir(), CONFIG_DIR_NAME))
            os.makedirs(config_dir, exist_ok=True)
            print(f"{Fore.YELLOW}{EMOJI['WARNING']} Using temporary config directory: {config_dir}{Style.RESET_ALL}")

        self.config_dir = config_dir
        self.config_file = os.path.normpath(os.path.join(config_dir, CONFIG_FILE_NAME))
        return self.config_dir, self.config_file

    def get_default_config(self) -> Dict[str, Dict[str, Any]]:
        """Get default configuration

        Returns:
            Dict[str, Dict[str, Any]]: Default configuration dictionary
        """
        return {
            'Paths': {
                # Comma separated install directory names, empty for the platform default
                'install_dirs': '',
            },
            'Process': {
                'name': 'cursor',
                'method': 'psutil',
                'timeout': '5',
            },
            'Logging': {
                'level': 'WARNING',
                'error_log': '',
            },
        }

    def setup(self) -> configparser.ConfigParser:
        """Read config.ini, filling in and saving any missing defaults

        Returns:
            configparser.ConfigParser: Configured ConfigParser object
        """
        self.setup_config_directory()
        default_config = self.get_default_config()

        invalid = False
        if os.path.exists(self.config_file):
            try:
                self.config.read(self.config_file, encoding='utf-8')
                logger.info(f"Read existing configuration from {self.config_file}")
            except configparser.Error as e:
                logger.error(f"Error reading config file: {e}")
                print(f"{Fore.RED}{EMOJI['ERROR']} Config file is invalid, using defaults: {e}{Style.RESET_ALL}")
                self.config = configparser.ConfigParser()
                invalid = True

        # Update config with default values for missing sections/options
        changed = not os.path.exists(self.config_file)
        for section, options in default_config.items():
            if not self.config.has_section(section):
                self.config.add_section(section)
                changed = True
            for option, value in options.items():
                if not self.config.has_option(section, option):
                    self.config.set(section, option, str(value))
                    changed = True

        # Leave a broken file alone so the user can fix it
        if changed and not invalid:
            try:
                with open(self.config_file, 'w', encoding='utf-8') as f:
                    self.config.write(f)
                logger.info(f"Configuration saved to {self.config_file}")
            except OSError as e:
                logger.error(f"Error saving config file: {e}")

        return self.config


def get_install_dirs(config: configparser.ConfigParser) -> List[str]:
    """Install directory overrides from [Paths], empty when unset"""
    raw = config.get('Paths', 'install_dirs', fallback='')
    return [part.strip() for part in raw.split(',') if part.strip()]


def get_log_level(config: configparser.ConfigParser) -> int:
    name = config.get('Logging', 'level', fallback='WARNING').strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {name!r}, using WARNING")
        return logging.WARNING
    return level


def get_process_timeout(config: configparser.ConfigParser) -> int:
    try:
        return config.getint('Process', 'timeout', fallback=5)
    except ValueError:
        logger.warning("Invalid [Process] timeout, using 5 seconds")
        return 5


def get_config(config_dir: Optional[str] = None) -> configparser.ConfigParser:
    """Get configuration, cached after the first load

    Args:
        config_dir: Directory holding config.ini; defaults to the Documents folder

    Returns:
        configparser.ConfigParser: ConfigParser object
    """
    global _config_cache

    if _config_cache is not None and config_dir is None:
        return _config_cache

    config = ConfigManager(config_dir).setup()
    if config_dir is None:
        _config_cache = config
    return config


def reset_config_cache() -> None:
    global _config_cache
    _config_cache = None
