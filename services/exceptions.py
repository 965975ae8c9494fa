"""
Error types raised by SiteCraft services.
"""
from typing import Optional


class SiteCraftError(Exception):
    """Base class for all service errors."""


class ConfigurationError(SiteCraftError):
    """A required setting (API key, endpoint) is missing."""


class ValidationError(SiteCraftError):
    """A request is missing required fields or refers to something that does not exist."""


class GenerationError(SiteCraftError):
    """
    Code generation failed. `kind` is "transport" when the LLM call failed and
    "parse" when its answer could not be turned into code.
    """

    def __init__(self, message: str, kind: str):
        super().__init__(message)
        self.kind = kind


class TransportError(GenerationError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message, kind="transport")
        self.status_code = status_code
        self.body = body


class ParseError(GenerationError):
    def __init__(self, message: str, section: Optional[str] = None):
        super().__init__(message, kind="parse")
        self.section = section


class NotFoundError(ValidationError):
    """A session, version, workspace or file id/path does not exist."""
