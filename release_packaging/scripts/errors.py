"""
Exception hierarchy for the release packaging pipeline.

The dispatcher captures any ReleasePipelineError raised while processing
a target and records it against that target; other exceptions propagate.
"""

from typing import Optional


class ReleasePipelineError(Exception):
    """Base exception for release pipeline errors."""

    def __init__(self, message: str, target: str = ""):
        self.message = message
        self.target = target
        super().__init__(message)

    def __str__(self) -> str:
        if self.target:
            return f"[{self.target}] {self.message}"
        return self.message


class ConfigurationError(ReleasePipelineError):
    """Raised for missing context keys, credentials or malformed configuration."""
    pass


class TemplateError(ReleasePipelineError):
    """Raised when a template references an unknown key or cannot be parsed."""

    def __init__(self, message: str, target: str = "", field: str = ""):
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message, target)


class DeliveryError(ReleasePipelineError):
    """Raised when a rendered output cannot be written or sent."""

    def __init__(
        self,
        message: str,
        target: str = "",
        status_code: Optional[int] = None,
        response: str = "",
    ):
        self.status_code = status_code
        self.response = response
        super().__init__(message, target)
