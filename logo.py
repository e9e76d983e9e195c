import os
import logging
from colorama import Fore, Style, init

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)

# Current version
version = "1.0.0"

# ASCII art logo
LOGO = f"""
{Fore.CYAN}
  ██████╗██╗   ██╗██████╗ ███████╗ ██████╗ ██████╗     ██╗██████╗
 ██╔════╝██║   ██║██╔══██╗██╔════╝██╔═══██╗██╔══██╗    ██║██╔══██╗
 ██║     ██║   ██║██████╔╝███████╗██║   ██║██████╔╝    ██║██║  ██║
 ██║     ██║   ██║██╔══██╗╚════██║██║   ██║██╔══██╗    ██║██║  ██║
 ╚██████╗╚██████╔╝██║  ██║███████║╚██████╔╝██║  ██║    ██║██████╔╝
  ╚═════╝ ╚═════╝ ╚═╝  ╚═╝╚══════╝ ╚═════╝ ╚═╝  ╚═╝    ╚═╝╚═════╝
{Style.RESET_ALL}"""

# Simplified logo for terminals with limited width
SIMPLIFIED_LOGO = f"""
{Fore.CYAN}== CURSOR ID MANAGER =={Style.RESET_ALL}
"""

def get_terminal_width() -> int:
    """Get terminal width, 80 when it cannot be detected."""
    try:
        return os.get_terminal_size().columns
    except OSError as e:
        logger.debug(f"Failed to get terminal width: {e}")
        return 80

def print_logo() -> None:
    """Print logo with version information based on terminal width."""
    terminal_width = get_terminal_width()
    print(SIMPLIFIED_LOGO if terminal_width < 70 else LOGO)
    print(f"{Fore.GREEN}Version: {version}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'═' * min(70, terminal_width)}{Style.RESET_ALL}")

if __name__ == "__main__":
    print_logo()
