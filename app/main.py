# app/main.py
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

import google.generativeai as genai

from app.config import Settings, load_settings
from app.errors import ConfigurationError, ImageApiError
from app.schemas import ImageErrorResponse, ImageSuccessResponse
from app.services.image_generator import build_image_model, generate_image
from app.services.request_validator import parse_image_request

# --- FastAPI App Initialization ---
app = FastAPI(title="Gemini Image Studio API")

# Global state: configuration is read once and injected into handlers
app_state = {"settings": load_settings()}

# --- CORS Configuration ---
# Allows the browser front-end to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_state["settings"].cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Server Startup Event ---
@app.on_event("startup")
async def startup_event():
    settings = app_state["settings"]
    if not settings.gemini_api_key:
        # Requests will answer with a configuration error until a key is set
        logger.error("GEMINI_API_KEY is not configured")
        return
    genai.configure(api_key=settings.gemini_api_key)
    logger.info(f"Gemini client configured for model {settings.model_id}")


# --- Dependencies ---
def get_settings() -> Settings:
    return app_state["settings"]


def get_image_model(settings: Settings = Depends(get_settings)):
    return build_image_model(settings)


# --- API Endpoints ---
@app.get("/")
def read_root():
    return {"Hello": "Welcome to the Gemini Image Studio API"}


@app.post(
    "/api/image",
    response_model=ImageSuccessResponse,
    responses={400: {"model": ImageErrorResponse}, 500: {"model": ImageErrorResponse}},
)
async def image_handler(
    request: Request,
    settings: Settings = Depends(get_settings),
    model=Depends(get_image_model),
):
    """
    Generates a new image from a prompt, or edits the supplied image, in the
    context of the prior conversation.
    """
    try:
        if not settings.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured")

        image_request = parse_image_request(await request.body())
        logger.info(f"Image request received: {len(image_request.history)} history turns, edit={image_request.image is not None}")

        result = await generate_image(image_request, model)
    except ImageApiError as e:
        logger.error(f"{type(e).__name__}: {e.message} {e.details or ''}".rstrip())
        return JSONResponse(status_code=e.status_code, content=e.to_response())
    except Exception as e:
        logger.exception("Error generating image")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to generate image", "details": str(e)},
        )

    return ImageSuccessResponse(image=result.image, description=result.description)
