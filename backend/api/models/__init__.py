"""API request/response models."""

from .errors import ErrorResponse

__all__ = ["ErrorResponse"]
