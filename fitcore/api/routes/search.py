"""Search routes for fitcore."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fitcore.api.dependencies import get_repositories
from fitcore.api.pagination import PageParams, page_params
from fitcore.core.errors import APIError, ErrorCode
from fitcore.core.logging import logger
from fitcore.core.pagination import Page, ScoreDescCursor
from fitcore.infrastructure.database import Repositories
from fitcore.models import SearchHit, SearchKind

router = APIRouter(prefix="/v1", tags=["Search"])


@router.get("/search", response_model=Page[SearchHit], response_model_exclude_none=True)
async def search(
    query: Optional[str] = Query(None, description="Free text query"),
    kind: Optional[str] = Query(None, alias="type", description="gym (default) or machine"),
    mode: Optional[str] = Query(None, description="'prefix' for type-ahead matching"),
    page: PageParams = Depends(page_params(default=10, maximum=50)),
    repos: Repositories = Depends(get_repositories),
):
    """Search gyms or machines ranked by relevance."""
    text = (query or "").strip()
    kind_name = (kind or "").strip().lower() or SearchKind.GYM.value
    prefix = (mode or "").strip().lower() == "prefix"

    cursor = page.decoded_cursor(ScoreDescCursor)

    if not text:
        return Page[SearchHit](items=[], has_more=False)

    try:
        search_kind = SearchKind(kind_name)
    except ValueError:
        raise APIError(400, ErrorCode.BAD_REQUEST, "type must be gym or machine")

    result = await asyncio.to_thread(
        repos.search.search, text, search_kind, page.limit, cursor, prefix
    )
    logger.info("search_performed", kind=search_kind.value, prefix=prefix, hits=len(result.items))
    return result
