import os
import errno
import logging
import time
import traceback
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from contextlib import contextmanager


class IdentityToolError(Exception):
    """Base class for every error surfaced to the command line."""


class NoBaseDirectory(IdentityToolError):
    """The per-user configuration directory could not be determined."""

    def __init__(self, reason: str = "home directory could not be resolved"):
        super().__init__(f"Cannot determine base configuration directory: {reason}")
        self.reason = reason


class IdentityIOError(IdentityToolError):
    """A read, write, remove or backup operation on an artifact failed."""

    def __init__(self, operation: str, path: Path, cause: Optional[BaseException] = None):
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to {operation} {self.path}{detail}")


class BackupFailed(IdentityIOError):
    """Backup could not be written; the original artifact was left untouched."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__("backup", path, cause)


class ParseError(IdentityToolError):
    """Structured record content is not a JSON object."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Could not parse {self.path}: {cause}")


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    CONFIGURATION = "configuration"
    PROCESS = "process"
    FILE_SYSTEM = "file_system"
    PERMISSION = "permission"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


@dataclass
class ErrorInfo:
    timestamp: float
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    exception: Optional[Exception] = None
    traceback: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)


class ErrorHandler:
    """Categorizes errors, logs them at a matching level and keeps a history"""

    def __init__(self, log_file: Optional[str] = None):
        self.log_file = log_file
        self.error_history: List[ErrorInfo] = []
        self.logger = logging.getLogger('CursorIdManager.ErrorHandler')
        if log_file:
            self._attach_log_file(log_file)

    def _attach_log_file(self, log_file: str) -> None:
        """Send a full copy of every handled error to log_file"""
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            self.logger.warning(f"Cannot write error log {log_file}, continuing without it: {e}")
            self.log_file = None
            return

        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(file_handler)

    def categorize_error(self, exception: BaseException) -> ErrorCategory:
        """Categorize error based on exception type"""
        if isinstance(exception, NoBaseDirectory):
            return ErrorCategory.CONFIGURATION
        if isinstance(exception, ParseError):
            return ErrorCategory.VALIDATION

        cause = exception.cause if isinstance(exception, IdentityIOError) else exception
        if isinstance(cause, PermissionError):
            return ErrorCategory.PERMISSION
        if isinstance(cause, OSError) and cause.errno in (errno.EACCES, errno.EPERM):
            return ErrorCategory.PERMISSION
        if isinstance(exception, (IdentityIOError, OSError)):
            return ErrorCategory.FILE_SYSTEM
        return ErrorCategory.UNKNOWN

    def determine_severity(self, exception: BaseException, category: ErrorCategory) -> ErrorSeverity:
        """Determine error severity"""
        # A failed backup means the tool refused to write, which is never silent
        if isinstance(exception, BackupFailed):
            return ErrorSeverity.CRITICAL
        if category in (ErrorCategory.PERMISSION, ErrorCategory.CONFIGURATION):
            return ErrorSeverity.HIGH
        if category in (ErrorCategory.FILE_SYSTEM, ErrorCategory.PROCESS):
            return ErrorSeverity.MEDIUM
        if category == ErrorCategory.VALIDATION:
            return ErrorSeverity.LOW
        return ErrorSeverity.MEDIUM

    def handle_error(self, exception: BaseException, context: Optional[Dict[str, Any]] = None) -> ErrorInfo:
        category = self.categorize_error(exception)
        severity = self.determine_severity(exception, category)
        error_info = ErrorInfo(
            timestamp=time.time(),
            category=category,
            severity=severity,
            message=str(exception),
            exception=exception,
            traceback=traceback.format_exc(),
            context=context or {},
        )
        self._log_error(error_info)
        self.error_history.append(error_info)
        return error_info

    def _log_error(self, error_info: ErrorInfo) -> None:
        context = ", ".join(f"{k}={v}" for k, v in error_info.context.items()) or "N/A"
        log_message = (
            f"[{error_info.category.value}/{error_info.severity.value}] "
            f"{error_info.message} (context: {context})"
        )

        if error_info.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message)
        elif error_info.severity == ErrorSeverity.HIGH:
            self.logger.error(log_message)
        elif error_info.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

        if error_info.traceback and error_info.traceback.strip() != "NoneType: None":
            self.logger.debug(error_info.traceback)

    def get_error_summary(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            'total_errors': len(self.error_history),
            'by_category': {},
            'by_severity': {},
        }
        for error in self.error_history:
            category = error.category.value
            severity = error.severity.value
            summary['by_category'][category] = summary['by_category'].get(category, 0) + 1
            summary['by_severity'][severity] = summary['by_severity'].get(severity, 0) + 1
        return summary


@contextmanager
def error_context(handler: ErrorHandler, context: Optional[Dict[str, Any]] = None):
    try:
        yield
    except IdentityToolError as e:
        handler.handle_error(e, context)
        raise
