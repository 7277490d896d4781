"""Entry listing, deletion and quiz endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from studybase.api.routes.upload import get_user_id
from studybase.api.schemas import EntriesResponse, EntryResponse, QuizEntryResponse, QuizResponse
from studybase.exceptions import EntryNotFoundError, NoEntryTypesError
from studybase.services.entry_store import EntryStore
from studybase.utils.logger import logger

router = APIRouter()


def get_entry_store() -> EntryStore:
    """Get entry store from main app."""
    from studybase.main import entry_store
    if entry_store is None:
        raise HTTPException(status_code=503, detail="Entry store not initialized")
    return entry_store


@router.get("/entries", response_model=EntriesResponse)
async def list_entries(
    type: Optional[str] = None,
    search: Optional[str] = None,
    store: EntryStore = Depends(get_entry_store),
    user_id: str = Depends(get_user_id),
):
    """
    List the caller's non-template entries, newest first.

    Args:
        type: Entry type filter ("all" for every type)
        search: Case-insensitive search over title and content
    """
    entries = store.list_entries(user_id, entry_type=type, search=search)
    return EntriesResponse(entries=[EntryResponse.model_validate(e) for e in entries])


@router.delete("/entries/{entry_id}")
async def delete_entry(
    entry_id: str,
    store: EntryStore = Depends(get_entry_store),
    user_id: str = Depends(get_user_id),
):
    """Delete one of the caller's entries."""
    try:
        store.delete_entry(user_id, entry_id)
    except EntryNotFoundError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=404, detail="Entry not found")
    return {"success": True}


@router.get("/quiz", response_model=QuizResponse)
async def quiz_entries(
    types: str = "",
    count: int = Query(10, ge=0),
    store: EntryStore = Depends(get_entry_store),
    user_id: str = Depends(get_user_id),
):
    """
    Pick shuffled entries of the requested types for a quiz.

    Args:
        types: Comma-separated entry types
        count: Largest number of entries to return
    """
    entry_types = [t.strip() for t in types.split(",") if t.strip()]
    try:
        selection = store.sample_entries(user_id, entry_types, count)
    except NoEntryTypesError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return QuizResponse(
        entries=[QuizEntryResponse.model_validate(e) for e in selection.entries],
        total_available=selection.total_available,
        counts_by_type=selection.counts_by_type,
    )
