"""
Pydantic models for request/response validation.
"""
from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""
    model_config = ConfigDict(populate_by_name=True)


# ========== Generations ==========

class Generation(str, Enum):
    """The six slang eras every translation covers."""
    CLASSIC = "Classic"
    BABY_BOOMERS = "Baby Boomers"
    GEN_X = "Gen X"
    MILLENNIALS = "Millennials"
    GEN_Z = "Gen Z"
    GEN_ALPHA = "Gen Alpha"


class DetectedGeneration(str, Enum):
    """Generation detected in the input; may also be plain English."""
    CLASSIC = "Classic"
    BABY_BOOMERS = "Baby Boomers"
    GEN_X = "Gen X"
    MILLENNIALS = "Millennials"
    GEN_Z = "Gen Z"
    GEN_ALPHA = "Gen Alpha"
    STANDARD_ENGLISH = "Standard English"


# ========== Translation Models ==========

class SlangDefinition(CamelModel):
    """A slang term used in a translation and what it means."""
    word: StrictStr
    definition: StrictStr


class GenerationTranslation(CamelModel):
    """The input rewritten in one generation's slang."""
    generation: Generation
    text: StrictStr
    slang_words: List[SlangDefinition] = Field(..., alias="slangWords")


class TranslationResult(CamelModel):
    """Structured model output returned to the client as ``output``."""
    detected_generation: DetectedGeneration = Field(..., alias="detectedGeneration")
    original_text: StrictStr = Field(..., alias="originalText")
    translations: List[GenerationTranslation] = Field(..., min_length=6, max_length=6)

    @model_validator(mode="after")
    def check_unique_generations(self):
        generations = {t.generation for t in self.translations}
        if len(generations) != len(self.translations):
            raise ValueError("translations must cover each generation exactly once")
        return self


class TranslationRequest(CamelModel):
    """Request body for POST /translate."""
    text: StrictStr = Field(default="", description="Text to translate")
    device_id: Optional[StrictStr] = Field(
        default=None,
        alias="deviceId",
        description="Stable device identifier used for rate limiting"
    )


class TranslationResponse(CamelModel):
    """Successful translation response."""
    output: TranslationResult
    cached: bool = False


# ========== Health Models ==========

class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    version: str
    timestamp: datetime
    services: Dict[str, str]


# ========== Error Models ==========

class ErrorResponse(CamelModel):
    """Error response model."""
    error: str
    code: str
    retry_after: Optional[int] = Field(default=None, alias="retryAfter")
