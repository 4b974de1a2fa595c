from typing import Any, List, Literal, NewType, Optional
from pydantic import BaseModel, ConfigDict, Field

# A trimmed, validated input name. Only validator.validate_name creates one.
NameCandidate = NewType("NameCandidate", str)

SUGGESTION_FIELDS = ("chineseName", "pinyin", "chineseMeaning", "englishMeaning")
SUGGESTION_SET_SIZE = 3


class GenerateNamePayload(BaseModel):
    # Left untyped so that the handler, not FastAPI, rejects bad input with INVALID_INPUT.
    englishName: Optional[Any] = Field(None, description="Latin-alphabet name to transliterate")


class NameSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    chineseName: str = Field(..., min_length=1)
    pinyin: str = Field(..., min_length=1)
    chineseMeaning: str = Field(..., min_length=1)
    englishMeaning: str = Field(..., min_length=1)


class GenerationOutcome(BaseModel):
    """Result of one pipeline run. `source` is bookkeeping only and never sent to clients."""
    names: List[NameSuggestion]
    source: Literal["model", "fallback"]


class GenerateNameResponse(BaseModel):
    success: Literal[True] = True
    message: str
    names: List[NameSuggestion]
    englishName: str
    timestamp: str


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    message: str
    error: Literal[
        "INVALID_INPUT",
        "RATE_LIMIT_EXCEEDED",
        "GENERATION_ERROR",
        "INTERNAL_SERVER_ERROR",
        "NOT_FOUND",
    ]


class HealthResponse(BaseModel):
    success: Literal[True] = True
    message: str
    timestamp: str
    version: str
