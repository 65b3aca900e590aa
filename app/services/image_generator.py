# app/services/image_generator.py
import google.generativeai as genai
from loguru import logger

from app.config import Settings
from app.errors import UpstreamError
from app.schemas import GenerationResult, ImageRequest
from app.services.history_codec import build_message_parts, decode_response, encode_history


def build_image_model(settings: Settings) -> genai.GenerativeModel:
    """Gemini model configured to answer with both text and an image."""
    return genai.GenerativeModel(
        settings.model_id,
        generation_config=settings.generation_config,
    )


async def generate_image(request: ImageRequest, model) -> GenerationResult:
    """
    Seeds a chat session with the prior history, sends the prompt (and the
    image to edit, if any) and decodes the reply.
    """
    history = encode_history(request.history)
    message_parts = build_message_parts(request.prompt, request.image)

    if request.image:
        logger.info("Processing image edit request")
    logger.info(f"Sending message with {len(message_parts)} parts and {len(history)} history turns")

    try:
        chat = model.start_chat(history=history)
        response = await chat.send_message_async(message_parts)
    except Exception as e:
        logger.error(f"Error in chat.send_message_async: {e}")
        raise UpstreamError("Gemini API error", details=str(e) or type(e).__name__) from e

    return decode_response(response)
