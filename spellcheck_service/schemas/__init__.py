"""
Pydantic schemas for API request/response models.
"""
from spellcheck_service.schemas.spellcheck import (
    CheckStatus,
    SpellingIssue,
    TermRequest,
    TextRequest,
    CheckResponse,
    SuggestResponse,
    TextCheckResponse,
    LoadedDictionaryInfo,
    DictionariesResponse,
    DictionaryStatusResponse,
    SelectedDictionariesUpdate,
    SelectedDictionariesResponse,
    ReloadResponse,
    HealthResponse,
)

__all__ = [
    "CheckStatus",
    "SpellingIssue",
    "TermRequest",
    "TextRequest",
    "CheckResponse",
    "SuggestResponse",
    "TextCheckResponse",
    "LoadedDictionaryInfo",
    "DictionariesResponse",
    "DictionaryStatusResponse",
    "SelectedDictionariesUpdate",
    "SelectedDictionariesResponse",
    "ReloadResponse",
    "HealthResponse",
]
