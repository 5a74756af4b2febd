from __future__ import annotations
from typing import Any, Dict, Optional

# The line scan never raises for malformed payroll content; only reading the
# source document or the layout file does.

class FolhaError(Exception):
    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None,
                 recoverable: bool = False):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})
        self.recoverable = recoverable


class PageExtractionError(FolhaError):
    """A page with no readable text layer; its lines are dropped."""

    def __init__(self, message: str, *, source: Optional[str] = None, page: Optional[int] = None):
        ctx = {k: v for k, v in (("source", source), ("page", page)) if v is not None}
        super().__init__(message, details=ctx, recoverable=True)
        self.source = source
        self.page = page


class FileExtractionError(FolhaError):
    """The whole file could not be opened; the batch records the message and goes on."""

    def __init__(self, message: str, *, source: Optional[str] = None):
        super().__init__(message, details={"source": source} if source else None, recoverable=True)
        self.source = source


class ConfigurationError(FolhaError):
    def __init__(self, message: str, *, config_key: Optional[str] = None):
        super().__init__(message, details={"config_key": config_key} if config_key else None)
        self.config_key = config_key
