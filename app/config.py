# app/config.py
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()

DEFAULT_MODEL_ID = "gemini-2.0-flash-exp"


class Settings(BaseModel):
    """Process-wide configuration, built once at startup."""
    gemini_api_key: str = ""
    model_id: str = DEFAULT_MODEL_ID
    temperature: float = 1.0
    top_p: float = 0.95
    top_k: int = 40
    cors_origins: List[str] = ["http://localhost:3000"]

    @property
    def generation_config(self) -> dict:
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            # Ask for both an image and its description in the reply
            "response_modalities": ["TEXT", "IMAGE"],
        }


def load_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        model_id=os.getenv("GEMINI_MODEL_ID", DEFAULT_MODEL_ID),
        temperature=float(os.getenv("GEMINI_TEMPERATURE", "1.0")),
        top_p=float(os.getenv("GEMINI_TOP_P", "0.95")),
        top_k=int(os.getenv("GEMINI_TOP_K", "40")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )
