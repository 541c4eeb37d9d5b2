"""
Spell-check service factory and request dependencies.
"""
from typing import Optional

from fastapi import HTTPException, Request, status

from spellcheck_service.config import Settings
from spellcheck_service.services.config_store import SELECTED_DICTS_KEY, ConfigStore
from spellcheck_service.services.dictionary_resource import DictionaryResource
from spellcheck_service.services.dictionary_set import DictionarySet
from spellcheck_service.utils.logger import get_logger

logger = get_logger("services.spellcheck")


def create_dictionary_set(settings: Settings, config_store: Optional[ConfigStore] = None) -> DictionarySet:
    """
    Build the dictionary set and its collaborators from settings.

    Args:
        settings: Application settings
        config_store: Runtime config to use (seeded from settings when omitted)

    Returns:
        DictionarySet with nothing loaded yet
    """
    config_store = config_store or ConfigStore.from_settings(settings)
    resources = DictionaryResource(settings.dictionary_paths_list)
    dictionary_set = DictionarySet(config_store, resources)

    def log_invalidation():
        logger.info("Cached spell-check verdicts invalidated", generation=dictionary_set.generation)

    dictionary_set.on("invalidate", log_invalidation)

    logger.info(
        "Spell-check service created",
        selected=config_store.get(SELECTED_DICTS_KEY),
        available=resources.available_languages(),
    )
    return dictionary_set


def get_dictionary_set(request: Request) -> DictionarySet:
    """
    Dependency to get the dictionary set from app state.

    Args:
        request: FastAPI request object

    Returns:
        DictionarySet instance

    Raises:
        HTTPException: If spell-check is disabled or not initialized
    """
    dictionary_set = getattr(request.app.state, "dictionary_set", None)
    if dictionary_set is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Spell-check service not available"
        )
    return dictionary_set


def get_config_store(request: Request) -> ConfigStore:
    """Dependency to get the runtime config store from app state."""
    config_store = getattr(request.app.state, "config_store", None)
    if config_store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Configuration store not available"
        )
    return config_store


def get_dictionary_resource(request: Request) -> DictionaryResource:
    """Dependency to get the dictionary resolver from app state."""
    resources = getattr(request.app.state, "dictionary_resource", None)
    if resources is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dictionary resources not available"
        )
    return resources
