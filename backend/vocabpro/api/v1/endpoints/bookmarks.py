"""
Bookmarks API Endpoints
REST API for saved items.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from vocabpro.core.dependencies import get_bookmarks_manager, get_catalog
from vocabpro.managers.bookmarks_manager import BookmarksManager
from vocabpro.models.state import Bookmark
from vocabpro.schemas.progress import BookmarkNotesRequest, BookmarkRequest, ImportRequest
from vocabpro.services.catalog_service import CatalogService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[Bookmark])
async def list_bookmarks(bookmarks: BookmarksManager = Depends(get_bookmarks_manager)):
    return bookmarks.get_all()


@router.get("/practice", response_model=list[Bookmark])
async def get_practice_bookmarks(
    limit: int = Query(default=10, ge=1, le=100),
    bookmarks: BookmarksManager = Depends(get_bookmarks_manager)
):
    """Least-reviewed bookmarks first."""
    return bookmarks.get_for_practice(limit)


@router.post("/")
async def add_bookmark(
    request: BookmarkRequest,
    bookmarks: BookmarksManager = Depends(get_bookmarks_manager),
    catalog: CatalogService = Depends(get_catalog)
):
    item = catalog.find(request.item_key)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item '{request.item_key}' not found in catalog")
    added = bookmarks.add(item, request.mode)
    return {"added": added, "count": bookmarks.count()}


@router.post("/toggle")
async def toggle_bookmark(
    request: BookmarkRequest,
    bookmarks: BookmarksManager = Depends(get_bookmarks_manager),
    catalog: CatalogService = Depends(get_catalog)
):
    item = catalog.find(request.item_key)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item '{request.item_key}' not found in catalog")
    return {"bookmarked": bookmarks.toggle(item, request.mode)}


@router.delete("/{item_key}")
async def remove_bookmark(
    item_key: str,
    bookmarks: BookmarksManager = Depends(get_bookmarks_manager)
):
    if not bookmarks.remove(item_key):
        raise HTTPException(status_code=404, detail=f"Bookmark '{item_key}' not found")
    return {"removed": True, "count": bookmarks.count()}


@router.post("/{item_key}/reviewed", response_model=Bookmark)
async def mark_reviewed(
    item_key: str,
    bookmarks: BookmarksManager = Depends(get_bookmarks_manager)
):
    bookmark = bookmarks.mark_reviewed(item_key)
    if bookmark is None:
        raise HTTPException(status_code=404, detail=f"Bookmark '{item_key}' not found")
    return bookmark


@router.put("/{item_key}/notes", response_model=Bookmark)
async def update_notes(
    item_key: str,
    request: BookmarkNotesRequest,
    bookmarks: BookmarksManager = Depends(get_bookmarks_manager)
):
    bookmark = bookmarks.update_notes(item_key, request.notes)
    if bookmark is None:
        raise HTTPException(status_code=404, detail=f"Bookmark '{item_key}' not found")
    return bookmark


@router.get("/export")
async def export_bookmarks(bookmarks: BookmarksManager = Depends(get_bookmarks_manager)):
    return {"data": bookmarks.export_json()}


@router.post("/import")
async def import_bookmarks(
    request: ImportRequest,
    bookmarks: BookmarksManager = Depends(get_bookmarks_manager)
):
    """Merge exported bookmarks; ones already present are skipped."""
    return {"imported": bookmarks.import_json(request.data)}


@router.delete("/")
async def clear_bookmarks(bookmarks: BookmarksManager = Depends(get_bookmarks_manager)):
    bookmarks.clear()
    return {"status": "cleared"}
