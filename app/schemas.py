# app/schemas.py
from pydantic import BaseModel, field_validator
from typing import List, Literal, Optional


class HistoryPart(BaseModel):
    """One piece of a conversation turn: some text, an image data URL, or both."""
    text: Optional[str] = None
    image: Optional[str] = None


class HistoryItem(BaseModel):
    """A single turn of the conversation as the browser keeps it."""
    role: Literal["user", "model"]
    parts: List[HistoryPart] = []


class ImageRequest(BaseModel):
    """Body of POST /api/image."""
    prompt: str
    image: Optional[str] = None
    history: Optional[List[HistoryItem]] = []

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt is required")
        return value

    @field_validator("image")
    @classmethod
    def empty_image_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("history")
    @classmethod
    def missing_history_is_empty(cls, value: Optional[List[HistoryItem]]) -> List[HistoryItem]:
        return value or []


class GenerationResult(BaseModel):
    image: str
    description: Optional[str] = None


class ImageSuccessResponse(GenerationResult):
    success: Literal[True] = True


class ImageErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str
    details: Optional[str] = None
