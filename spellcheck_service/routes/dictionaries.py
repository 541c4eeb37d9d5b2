"""
API routes for inspecting and selecting dictionaries.
"""
from fastapi import APIRouter, Depends, status

from spellcheck_service.schemas.spellcheck import (
    DictionariesResponse,
    DictionaryStatusResponse,
    LoadedDictionaryInfo,
    ReloadResponse,
    SelectedDictionariesResponse,
    SelectedDictionariesUpdate,
)
from spellcheck_service.services.config_store import SELECTED_DICTS_KEY, ConfigStore
from spellcheck_service.services.dictionary_set import DictionarySet
from spellcheck_service.services.spellcheck import get_config_store, get_dictionary_set
from spellcheck_service.utils.language_code import normalize_language_code
from spellcheck_service.utils.logger import get_logger

logger = get_logger("routes.dictionaries")

router = APIRouter(prefix="/api/v1/dictionaries", tags=["Dictionaries"])


@router.get("", response_model=DictionariesResponse)
async def list_dictionaries(
    dictionary_set: DictionarySet = Depends(get_dictionary_set),
) -> DictionariesResponse:
    """
    List selected, loaded and available dictionaries.

    **No authentication required** - this endpoint is public.
    """
    loaded = [
        LoadedDictionaryInfo(
            language=entry.language,
            word_count=entry.checker.word_count(),
            aff_path=str(entry.aff_path) if entry.aff_path else None,
            dic_path=str(entry.dic_path) if entry.dic_path else None,
            load_time_seconds=round(entry.load_time_seconds, 3),
        )
        for entry in dictionary_set.get_entries()
    ]

    return DictionariesResponse(
        selected=dictionary_set.config.get(SELECTED_DICTS_KEY) or [],
        loaded=loaded,
        available=dictionary_set.resources.available_languages(),
        ready=dictionary_set.is_ready(),
        generation=dictionary_set.generation,
    )


@router.put(
    "/selected",
    response_model=SelectedDictionariesResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(get_dictionary_set)],
)
async def update_selected_dictionaries(
    body: SelectedDictionariesUpdate,
    config_store: ConfigStore = Depends(get_config_store),
) -> SelectedDictionariesResponse:
    """
    Replace the selected dictionaries.

    The dictionary set reloads in the background; poll GET /api/v1/dictionaries
    until 'ready' is true.
    """
    changed = config_store.set(SELECTED_DICTS_KEY, body.languages)

    logger.info("Selected dictionaries updated", languages=body.languages, changed=changed)

    return SelectedDictionariesResponse(selected=body.languages, changed=changed)


@router.post(
    "/reload",
    response_model=ReloadResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def reload_dictionaries(
    dictionary_set: DictionarySet = Depends(get_dictionary_set),
) -> ReloadResponse:
    """Schedule a reload; a no-op when loaded dictionaries already match the selection."""
    dictionary_set.schedule_reload()
    return ReloadResponse(scheduled=True)


@router.get("/{code}", response_model=DictionaryStatusResponse)
async def get_dictionary_status(
    code: str,
    dictionary_set: DictionarySet = Depends(get_dictionary_set),
) -> DictionaryStatusResponse:
    """Check whether the dictionary for a language is loaded."""
    language = normalize_language_code(code)
    return DictionaryStatusResponse(language=language, loaded=dictionary_set.is_loaded(language))
