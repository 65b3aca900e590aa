# app/services/request_validator.py
import json
import re
from typing import Any

from pydantic import ValidationError as SchemaError

from app.errors import MalformedRequestError, ValidationError
from app.schemas import ImageRequest
from app.services.history_codec import split_data_url

BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/=]+$")


def validate_data_url(data_url: str) -> None:
    """Checks the shape of an image data URL before anything is sent upstream."""
    if not data_url.startswith("data:"):
        raise ValidationError("Invalid image data URL format")
    _, payload = split_data_url(data_url)
    payload = re.sub(r"\s", "", payload)
    if not payload or not BASE64_PATTERN.match(payload):
        raise ValidationError("Image data is empty or not valid base64")


def _describe(error: SchemaError) -> str:
    locations = [e["loc"] for e in error.errors()]
    if any(loc and loc[0] == "prompt" for loc in locations):
        return "Prompt is required"
    if any(loc and loc[0] == "image" for loc in locations):
        return "Invalid image data URL format"
    first = error.errors()[0]
    where = ".".join(str(p) for p in first["loc"])
    return f"Invalid history: {where}: {first['msg']}"


def parse_image_request(raw_body: bytes) -> ImageRequest:
    """
    Turns the raw request body into an ImageRequest.

    Raises MalformedRequestError when the body is not a JSON object and
    ValidationError when a field is missing or has the wrong shape. A prompt
    problem is always reported ahead of an image problem.
    """
    try:
        payload: Any = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedRequestError("Invalid JSON in request body") from e
    if not isinstance(payload, dict):
        raise MalformedRequestError("Invalid JSON in request body")

    try:
        request = ImageRequest.model_validate(payload)
    except SchemaError as e:
        raise ValidationError(_describe(e)) from e

    if request.image is not None:
        validate_data_url(request.image)
    return request
