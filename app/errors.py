# app/errors.py
from typing import Any, Dict, Optional


class ImageApiError(Exception):
    """Base for every failure the image endpoint reports to the client."""
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ConfigurationError(ImageApiError):
    status_code = 500


class MalformedRequestError(ImageApiError):
    status_code = 400


class ValidationError(ImageApiError):
    status_code = 400


class UpstreamError(ImageApiError):
    """The model call itself raised."""
    status_code = 500


class NoImageError(ImageApiError):
    """The model answered but produced no image."""
    status_code = 500
