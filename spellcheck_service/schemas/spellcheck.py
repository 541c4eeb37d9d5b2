"""
Pydantic schemas for spell-check functionality.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from spellcheck_service.utils.language_code import (
    normalize_language_code,
    unique_codes,
    validate_language_code,
)


class CheckStatus(str, Enum):
    """Verdict for a single term."""
    CORRECT = "correct"
    INCORRECT = "incorrect"
    NOT_READY = "not-ready"


class SpellingIssue(BaseModel):
    """A spelling issue with suggested corrections."""

    word: str = Field(description="Misspelled word as it appeared in the text")
    suggestions: List[str] = Field(description="Suggested corrections, grouped by dictionary")


class TermRequest(BaseModel):
    """Request body for single-term lookups."""

    term: str = Field(..., min_length=1, max_length=200, description="Word to check")


class TextRequest(BaseModel):
    """Request body for checking running text."""

    text: str = Field(..., max_length=100_000, description="Text to check")


class CheckResponse(BaseModel):
    """Verdict for a single term."""

    term: str
    status: CheckStatus = Field(description="correct, incorrect or not-ready (dictionaries still loading)")
    generation: int = Field(description="Dictionary generation; discard cached verdicts from older generations")

    class Config:
        json_schema_extra = {
            "example": {
                "term": "helllo",
                "status": "incorrect",
                "generation": 1
            }
        }


class SuggestResponse(BaseModel):
    """Suggestions for a single term."""

    term: str
    suggestions: List[str]
    generation: int


class TextCheckResponse(BaseModel):
    """Spelling issues found in a text."""

    ready: bool = Field(description="False while dictionaries are loading; issues are then empty")
    issues: List[SpellingIssue]
    generation: int


class LoadedDictionaryInfo(BaseModel):
    """Details of a loaded dictionary."""

    language: str
    word_count: int
    aff_path: Optional[str] = None
    dic_path: Optional[str] = None
    load_time_seconds: float


class DictionariesResponse(BaseModel):
    """Desired, loaded and available dictionaries."""

    selected: List[str] = Field(description="Desired language codes from configuration")
    loaded: List[LoadedDictionaryInfo] = Field(description="Dictionaries currently answering queries")
    available: List[str] = Field(description="Language codes with dictionary files on disk")
    ready: bool
    generation: int

    class Config:
        json_schema_extra = {
            "example": {
                "selected": ["en_GB", "de_DE"],
                "loaded": [
                    {
                        "language": "en_GB",
                        "word_count": 104211,
                        "aff_path": "/app/data/dictionaries/en_GB/en_GB.aff",
                        "dic_path": "/app/data/dictionaries/en_GB/en_GB.dic",
                        "load_time_seconds": 3.41
                    }
                ],
                "available": ["de_DE", "en_GB", "en_US"],
                "ready": False,
                "generation": 2
            }
        }


class DictionaryStatusResponse(BaseModel):
    """Whether a single language is loaded."""

    language: str
    loaded: bool


class SelectedDictionariesUpdate(BaseModel):
    """Request body for changing the selected dictionaries."""

    languages: List[str] = Field(..., max_length=32, description="Language codes, e.g. ['en_GB', 'de-DE']")

    @field_validator("languages")
    @classmethod
    def normalize_languages(cls, value: List[str]) -> List[str]:
        normalized = [normalize_language_code(code) for code in value]
        invalid = [code for code in normalized if not validate_language_code(code)]
        if invalid:
            raise ValueError(f"Invalid language codes: {', '.join(invalid)}")
        return unique_codes(normalized)


class SelectedDictionariesResponse(BaseModel):
    """Result of a selection update."""

    selected: List[str]
    changed: bool = Field(description="False when the selection was already in place")


class ReloadResponse(BaseModel):
    """Result of a reload request."""

    scheduled: bool


class HealthResponse(BaseModel):
    """Schema for health check endpoint response."""

    status: str
    dictionaries_loaded: int
    ready: bool
    timestamp: datetime
