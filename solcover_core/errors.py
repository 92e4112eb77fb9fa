"""
Exceptions raised while locating, reading and validating a coverage configuration document.
"""
from typing import Optional


class SolcoverConfigError(Exception):
    """Base class for all configuration loading failures."""
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message: str = message
        self.path: Optional[str] = path


class ConfigNotFoundError(SolcoverConfigError, FileNotFoundError):
    """The configuration document path does not resolve to a file."""
    def __init__(self, path: str):
        super().__init__(f"Coverage configuration document not found: {path}", path)

    def __str__(self) -> str:
        return self.message


class ConfigParseError(SolcoverConfigError, ValueError):
    """
    The document exists but cannot be read as a coverage configuration:
    invalid syntax, an unexpected top-level value, a missing required field,
    or a field with the wrong shape.
    """
    def __init__(self, message: str, path: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, path)
        self.field: Optional[str] = field

    def __str__(self) -> str:
        location = self.path if self.path is not None else "<document>"
        if self.field is not None:
            return f"{location}: field '{self.field}': {self.message}"
        return f"{location}: {self.message}"
