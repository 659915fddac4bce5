"""Exceptions raised by AuditAPI"""

from typing import Optional


class AuditAPIError(Exception):
    """Base class for AuditAPI errors"""
    pass


class ConfigLoadError(AuditAPIError):
    """Raised when scoring.yaml or ruleset.yaml cannot be loaded or is invalid"""

    def __init__(self, message: str, config_path: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.config_path = str(config_path)
        self.original_error = original_error


class AuditError(AuditAPIError):
    """Raised when an audit run fails for a given file"""

    def __init__(self, message: str, file_path: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.file_path = str(file_path)
        self.original_error = original_error
