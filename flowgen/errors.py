"""
Error taxonomy shared by the service layer and the HTTP boundary.

Every error carries the HTTP status it maps to; the app turns them into the
`{success: false, error}` envelope.
"""
from typing import Optional


class FlowgenError(Exception):
    """Base class for errors that may reach the HTTP boundary."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GenerationFailure(FlowgenError):
    """The model call failed or returned a structurally invalid workflow."""

    status_code = 400

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        # Raw model text, kept so callers can look for refusal wording.
        self.raw_response = raw_response


class ValidationFailure(FlowgenError):
    """Advisory validation could not complete. Never leaves ValidationClient."""


class BadRequest(FlowgenError):
    status_code = 400


class NotFound(FlowgenError):
    status_code = 404


class ServiceError(FlowgenError):
    status_code = 500
