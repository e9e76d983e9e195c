import os
import psutil
import time
import logging
import platform
import subprocess
from enum import Enum
from typing import List, Optional, Set
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

# Define emoji constants
EMOJI = {
    "PROCESS": "⚙️",
    "SUCCESS": "✅",
    "ERROR": "❌",
    "INFO": "ℹ️",
    "WAIT": "⏳",
    "KILL": "🛑",
    "SEARCH": "🔍"
}

DEFAULT_PROCESS_NAME = "cursor"


class TerminationOutcome(Enum):
    TERMINATED = "terminated"
    NOT_FOUND = "not_found"
    ERROR = "error"


class ProcessTerminator:
    def terminate(self, name: str) -> TerminationOutcome:
        raise NotImplementedError


class PsutilTerminator(ProcessTerminator):
    """Closes matching processes gently, then force kills whatever is left."""

    def __init__(self, timeout: int = 5, poll_interval: float = 0.5):
        """Initialize PsutilTerminator.

        Args:
            timeout: Maximum time to wait for processes to terminate naturally
            poll_interval: Delay between liveness checks while waiting
        """
        self.timeout = max(1, timeout)  # Ensure timeout is at least 1 second
        self.poll_interval = poll_interval

    def _own_pids(self) -> Set[int]:
        """This process and its ancestors, which may carry the target name themselves."""
        pids = {os.getpid()}
        try:
            pids.update(parent.pid for parent in psutil.Process(os.getpid()).parents())
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.debug(f"Could not list parent processes: {e}")
        return pids

    def find_processes(self, name: str) -> List[psutil.Process]:
        """Find all processes whose name contains name, case-insensitively."""
        target = name.lower()
        own_pids = self._own_pids()
        found = []
        print(f"{Fore.CYAN}{EMOJI['SEARCH']} Searching for {name} processes...{Style.RESET_ALL}")

        for proc in psutil.process_iter(['pid', 'name']):
            try:
                if proc.info['pid'] in own_pids:
                    continue
                proc_name = proc.info['name'].lower() if proc.info['name'] else ""
                if target in proc_name:
                    found.append(proc)
            except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
                logger.warning(f"Error accessing process: {e}")
                continue

        return found

    def _still_running(self, processes: List[psutil.Process]) -> List[psutil.Process]:
        running = []
        for proc in processes:
            try:
                if proc.is_running():
                    running.append(proc)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return running

    def terminate(self, name: str) -> TerminationOutcome:
        processes = self.find_processes(name)
        if not processes:
            logger.info(f"No {name} processes found")
            print(f"{Fore.GREEN}{EMOJI['INFO']} No running {name} processes found{Style.RESET_ALL}")
            return TerminationOutcome.NOT_FOUND

        print(f"{Fore.CYAN}{EMOJI['INFO']} Found {len(processes)} {name} processes{Style.RESET_ALL}")
        for proc in processes:
            try:
                logger.info(f"Terminating process {proc.pid}")
                proc.terminate()
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied as e:
                logger.error(f"Access denied terminating process {proc.pid}: {e}")
                print(f"{Fore.RED}{EMOJI['ERROR']} Access denied for process {proc.pid}{Style.RESET_ALL}")
                return TerminationOutcome.ERROR

        print(f"{Fore.CYAN}{EMOJI['WAIT']} Waiting up to {self.timeout} seconds for processes to close...{Style.RESET_ALL}")
        still_running = self._still_running(processes)
        start_time = time.time()
        while still_running and time.time() - start_time < self.timeout:
            time.sleep(self.poll_interval)
            still_running = self._still_running(still_running)

        if still_running:
            pids = ", ".join(str(p.pid) for p in still_running)
            logger.warning(f"Timeout reached. Still running: {pids}")
            print(f"{Fore.RED}{EMOJI['KILL']} Force killing remaining processes: {pids}{Style.RESET_ALL}")
            for proc in still_running:
                try:
                    proc.kill()
                except psutil.NoSuchProcess:
                    continue
                except psutil.AccessDenied as e:
                    logger.error(f"Error killing process {proc.pid}: {e}")
            time.sleep(self.poll_interval)
            still_running = self._still_running(still_running)

        if still_running:
            pids = ", ".join(str(p.pid) for p in still_running)
            logger.error(f"Failed to terminate processes: {pids}")
            print(f"{Fore.RED}{EMOJI['ERROR']} Failed to terminate some processes: {pids}{Style.RESET_ALL}")
            return TerminationOutcome.ERROR

        print(f"{Fore.GREEN}{EMOJI['SUCCESS']} All {name} processes have been closed{Style.RESET_ALL}")
        return TerminationOutcome.TERMINATED


class CommandTerminator(ProcessTerminator):
    """Delegates to the host's own kill utility (taskkill or pkill)."""

    def __init__(self, system: Optional[str] = None):
        self.system = system or platform.system()

    def build_command(self, name: str) -> List[str]:
        if self.system == "Windows":
            return ["taskkill", "/F", "/IM", f"{name}.exe"]
        # Exact name match so this tool (cursor-id-manager) is never a target
        return ["pkill", "-i", "-x", name]

    def terminate(self, name: str) -> TerminationOutcome:
        command = self.build_command(name)
        logger.info(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            logger.error(f"Could not run {command[0]}: {e}")
            print(f"{Fore.RED}{EMOJI['ERROR']} Could not run {command[0]}: {e}{Style.RESET_ALL}")
            return TerminationOutcome.ERROR

        if result.returncode == 0:
            print(f"{Fore.GREEN}{EMOJI['SUCCESS']} All {name} processes have been terminated{Style.RESET_ALL}")
            return TerminationOutcome.TERMINATED

        logger.info(f"{command[0]} exited with {result.returncode}: {result.stderr.strip()}")
        print(f"{Fore.GREEN}{EMOJI['INFO']} No running {name} processes found{Style.RESET_ALL}")
        return TerminationOutcome.NOT_FOUND


def get_terminator(method: str = "psutil", timeout: int = 5) -> ProcessTerminator:
    if method == "command":
        return CommandTerminator()
    if method != "psutil":
        logger.warning(f"Unknown termination method {method!r}, using psutil")
    return PsutilTerminator(timeout)


def quit_cursor(name: str = DEFAULT_PROCESS_NAME, method: str = "psutil", timeout: int = 5) -> TerminationOutcome:
    """Convenient function for directly calling the quit function."""
    print(f"{Fore.CYAN}{EMOJI['PROCESS']} Attempting to close {name} processes...{Style.RESET_ALL}")
    return get_terminator(method, timeout).terminate(name)
