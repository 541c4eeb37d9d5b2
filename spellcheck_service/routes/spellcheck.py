"""
API routes for spell-checking terms and text.
"""
from fastapi import APIRouter, Depends

from spellcheck_service.schemas.spellcheck import (
    CheckResponse,
    SuggestResponse,
    TermRequest,
    TextCheckResponse,
    TextRequest,
)
from spellcheck_service.services.dictionary_set import DictionarySet
from spellcheck_service.services.spellcheck import get_dictionary_set
from spellcheck_service.utils.logger import get_logger

logger = get_logger("routes.spellcheck")

router = APIRouter(prefix="/api/v1/spellcheck", tags=["Spell-check"])


@router.post("/check", response_model=CheckResponse)
async def check_term(
    body: TermRequest,
    dictionary_set: DictionarySet = Depends(get_dictionary_set),
) -> CheckResponse:
    """
    Check a single term against every loaded dictionary.

    A term is correct when any loaded dictionary accepts it. While the
    selected dictionaries are still loading the status is 'not-ready';
    callers must not treat that as a misspelling.
    """
    verdict = dictionary_set.check(body.term)
    return CheckResponse(term=body.term, status=verdict, generation=dictionary_set.generation)


@router.post("/suggest", response_model=SuggestResponse)
async def suggest_term(
    body: TermRequest,
    dictionary_set: DictionarySet = Depends(get_dictionary_set),
) -> SuggestResponse:
    """
    Get suggestions for a term.

    Suggestions of all loaded dictionaries are concatenated in load order;
    the list is empty while dictionaries are loading.
    """
    return SuggestResponse(
        term=body.term,
        suggestions=dictionary_set.suggest(body.term),
        generation=dictionary_set.generation,
    )


@router.post("/text", response_model=TextCheckResponse)
async def check_text(
    body: TextRequest,
    dictionary_set: DictionarySet = Depends(get_dictionary_set),
) -> TextCheckResponse:
    """Find misspelled words in a text, one issue per distinct word."""
    ready = dictionary_set.is_ready()
    issues = dictionary_set.check_text(body.text)

    logger.debug("Text checked", characters=len(body.text), issues=len(issues), ready=ready)

    return TextCheckResponse(ready=ready, issues=issues, generation=dictionary_set.generation)
