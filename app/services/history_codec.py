# app/services/history_codec.py
"""
Translation between the browser's conversation history and the Gemini SDK's
chat format, plus decoding of the model reply into a GenerationResult.

Wire parts use the dict form the google-generativeai SDK accepts:
``{"text": ...}`` or ``{"inline_data": {"mime_type": ..., "data": <bytes>}}``.
"""
import base64
import binascii
import re
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from app.errors import NoImageError, ValidationError
from app.schemas import GenerationResult, HistoryItem, HistoryPart

DEFAULT_RESPONSE_MIME_TYPE = "image/png"

WirePart = Dict[str, Any]
WireTurn = Dict[str, Any]


def infer_mime_type(data_url: str) -> str:
    return "image/png" if "image/png" in data_url else "image/jpeg"


def split_data_url(data_url: str) -> Tuple[str, str]:
    """Returns (mime_type, base64 payload) for a ``data:<mime>;base64,<payload>`` URL."""
    _, comma, payload = data_url.partition(",")
    if not comma:
        raise ValidationError("Malformed image data URL")
    return infer_mime_type(data_url), payload


def inline_part(data_url: str) -> WirePart:
    mime_type, payload = split_data_url(data_url)
    try:
        data = base64.b64decode(re.sub(r"\s", "", payload), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Image data is empty or not valid base64") from e
    return {"inline_data": {"mime_type": mime_type, "data": data}}


def encode_part(part: HistoryPart, role: str) -> WirePart:
    if part.text:
        return {"text": part.text}
    # The model does not take its own earlier images back as input
    if part.image and role == "user":
        try:
            return inline_part(part.image)
        except ValidationError as e:
            # An unreadable earlier image is left out rather than failing the request
            logger.warning(f"Dropping history image: {e.message}")
    return {"text": ""}


def _is_empty(wire_part: WirePart) -> bool:
    return not wire_part.get("text") and not wire_part.get("inline_data")


def encode_turn(item: HistoryItem) -> WireTurn:
    parts = [encode_part(part, item.role) for part in item.parts]
    return {"role": item.role, "parts": [p for p in parts if not _is_empty(p)]}


def encode_history(history: List[HistoryItem]) -> List[WireTurn]:
    """Encodes prior turns, dropping any turn left with nothing to send."""
    turns = [encode_turn(item) for item in history]
    return [turn for turn in turns if turn["parts"]]


def build_message_parts(prompt: str, image: Optional[str] = None) -> List[WirePart]:
    parts: List[WirePart] = [{"text": prompt}]
    if image:
        parts.append(inline_part(image))
    return parts


def _payload_to_base64(data: Any) -> str:
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(data).decode("ascii")
    return str(data)


def decode_response(response: Any) -> GenerationResult:
    """
    Folds the parts of the first candidate into a GenerationResult.

    The last inline-data part becomes the image and the last text part the
    description. A reply without any image is a failure.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise NoImageError("No response from Gemini API")

    parts = candidates[0].content.parts
    logger.info(f"Number of parts in response: {len(parts)}")

    image_data = None
    mime_type = DEFAULT_RESPONSE_MIME_TYPE
    description = None
    image_count = text_count = 0

    for part in parts:
        inline = getattr(part, "inline_data", None)
        text = getattr(part, "text", None)
        if inline and inline.data:
            image_data = _payload_to_base64(inline.data)
            mime_type = inline.mime_type or DEFAULT_RESPONSE_MIME_TYPE
            image_count += 1
        elif text:
            description = text
            text_count += 1

    if image_count > 1 or text_count > 1:
        logger.warning(
            f"Gemini returned {image_count} image parts and {text_count} text parts; keeping the last of each"
        )

    if image_data is None:
        raise NoImageError("No image data in Gemini response")

    logger.info(f"Image data received, length: {len(image_data)}, MIME type: {mime_type}")
    return GenerationResult(image=f"data:{mime_type};base64,{image_data}", description=description)
