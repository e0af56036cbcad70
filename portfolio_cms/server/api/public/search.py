"""Public site-wide search endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database import get_session
from portfolio_cms.core.models.io.common import ApiResponse
from portfolio_cms.core.models.io.search import SearchResults
from portfolio_cms.server.services.search import MIN_QUERY_LENGTH, SearchService

router = APIRouter(tags=["search"])


@router.get(
    "",
    response_model=ApiResponse[SearchResults],
    summary="Search Site Content",
    description="Search published blog posts, projects, case studies and experience, most relevant first.",
    responses={400: {"description": "Query too short or limit out of range"}},
)
async def search(
    q: str = Query(..., min_length=MIN_QUERY_LENGTH, max_length=200),
    limit: int = Query(10, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
) -> ApiResponse[SearchResults]:
    try:
        results = await SearchService(session).search(q, limit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return ApiResponse[SearchResults](data=results)
