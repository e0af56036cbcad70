"""
Generic admin CRUD routes.

Most admin resources share the same surface: paginated listing with search and
field filters, lookup by id, create, partial update (``PUT`` or ``PATCH``) and
soft delete. :func:`build_crud_router` produces that surface for one entity.
Every write is recorded in the audit log and invalidates the affected caches.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from portfolio_cms.core.cache.invalidation import invalidate_site_cache
from portfolio_cms.core.database import get_session
from portfolio_cms.core.database.base import dump_json
from portfolio_cms.core.database.repositories import SlugRepository, SqlRepository
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from portfolio_cms.core.slugs import ensure_unique_slug, generate_slug
from portfolio_cms.server.services.audit import record_admin_action

logger = get_logger(__name__)

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


def parse_filter_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return value


def to_columns(
    model: Type[SQLModel],
    data: Dict[str, Any],
    json_fields: Sequence[str] = (),
    field_map: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Convert a payload dump into column values.

    Renames keys through ``field_map``, serialises ``json_fields`` to JSON text
    and drops ``None`` for non-nullable columns so partial updates cannot null them.
    """
    field_map = field_map or {}
    columns = model.__table__.columns
    values: Dict[str, Any] = {}
    for key, value in data.items():
        name = field_map.get(key, key)
        if value is not None and key in json_fields:
            value = dump_json(value)
        if value is None and name in columns and not columns[name].nullable:
            continue
        values[name] = value
    return values


async def assign_slug(
    repo: SlugRepository,
    values: Dict[str, Any],
    slug_source: str,
    label: str,
    exclude_id: Optional[str] = None,
) -> None:
    """Generate a unique slug from ``slug_source`` or reject an explicit slug already in use."""
    explicit = values.get("slug")
    if explicit:
        if await repo.slug_exists(explicit, exclude_id=exclude_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"A {label.lower()} with this slug already exists",
            )
        return
    if exclude_id is not None:
        return
    base = generate_slug(values.get(slug_source) or "") or label.lower().replace(" ", "-")

    async def taken(slug: str) -> bool:
        return await repo.slug_exists(slug)

    values["slug"] = await ensure_unique_slug(base, taken)


def build_crud_router(
    *,
    model: Type[SQLModel],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    read_schema: Type[BaseModel],
    resource: str,
    label: str,
    tag: str,
    json_fields: Sequence[str] = (),
    field_map: Optional[Mapping[str, str]] = None,
    search_fields: Sequence[str] = (),
    filter_fields: Sequence[str] = (),
    slug_source: Optional[str] = None,
    repository: Optional[Callable[[AsyncSession], SqlRepository]] = None,
    on_change: Callable[[], int] = invalidate_site_cache,
) -> APIRouter:
    """
    Build list/get/create/update/delete routes for ``model``.

    Args:
        model: SQLModel table class
        create_schema: Request body for ``POST``
        update_schema: Request body for ``PUT``/``PATCH``; only provided fields change
        read_schema: Response item schema (``from_attributes``)
        resource: Audit resource name, e.g. ``skill_category``
        label: Human readable singular name used in messages
        tag: OpenAPI tag
        json_fields: Payload fields stored as JSON text
        field_map: Payload field to column renames
        search_fields: Columns matched by the ``search`` query parameter
        filter_fields: Columns that may be filtered by equality through query parameters
        slug_source: Field a unique slug is generated from when none is given
        repository: Repository factory; a generic repository over ``model`` when omitted
        on_change: Cache invalidation run after every write
    """
    router = APIRouter(tags=[tag])
    repo_class = SlugRepository if slug_source else SqlRepository

    def get_repo(session: AsyncSession):
        if repository is not None:
            return repository(session)
        return repo_class(session, model, search_fields=search_fields)

    async def load(session: AsyncSession, item_id: str):
        entity = await get_repo(session).get_by_id(item_id)
        if entity is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        return entity

    @router.get(
        "",
        response_model=PaginatedResponse[read_schema],
        summary=f"List {label} Items",
        description=f"List {label.lower()} items with pagination, search and field filters.",
    )
    async def list_items(
        request: Request,
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1, le=100),
        search: Optional[str] = Query(None, max_length=200),
        include_inactive: bool = Query(False),
        session: AsyncSession = Depends(get_session),
    ):
        filters = {
            name: parse_filter_value(request.query_params[name])
            for name in filter_fields
            if name in request.query_params
        }
        items, total = await get_repo(session).paginate(page, limit, filters, search, include_inactive)
        return PaginatedResponse[read_schema](
            data=[read_schema.model_validate(item) for item in items],
            pagination=Pagination.build(page, limit, total),
        )

    @router.get(
        "/{item_id}",
        response_model=ApiResponse[read_schema],
        summary=f"Get {label}",
        responses={404: {"description": f"{label} not found"}},
    )
    async def get_item(item_id: str, session: AsyncSession = Depends(get_session)):
        entity = await load(session, item_id)
        return ApiResponse[read_schema](data=read_schema.model_validate(entity))

    @router.post(
        "",
        response_model=ApiResponse[read_schema],
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label}",
        responses={400: {"description": "Invalid data or duplicate slug"}},
    )
    async def create_item(request: Request, payload: create_schema, session: AsyncSession = Depends(get_session)):
        values = to_columns(model, payload.model_dump(), json_fields, field_map)
        if slug_source:
            await assign_slug(get_repo(session), values, slug_source, label)
        entity = await get_repo(session).create(model(**values))
        on_change()
        await record_admin_action(session, request, "create", resource, entity.id)
        logger.info(f"Created {resource} {entity.id}")
        return ApiResponse[read_schema](message=f"{label} created successfully", data=read_schema.model_validate(entity))

    async def update_item(request: Request, item_id: str, payload: update_schema, session: AsyncSession):
        entity = await load(session, item_id)
        changes = to_columns(model, payload.model_dump(exclude_unset=True), json_fields, field_map)
        if slug_source and changes.get("slug"):
            await assign_slug(get_repo(session), changes, slug_source, label, exclude_id=entity.id)
        entity = await get_repo(session).apply_changes(entity, changes)
        on_change()
        await record_admin_action(session, request, "update", resource, entity.id, details={"fields": sorted(changes)})
        return ApiResponse[read_schema](message=f"{label} updated successfully", data=read_schema.model_validate(entity))

    @router.put("/{item_id}", response_model=ApiResponse[read_schema], summary=f"Update {label}")
    async def put_item(
        request: Request, item_id: str, payload: update_schema, session: AsyncSession = Depends(get_session)
    ):
        return await update_item(request, item_id, payload, session)

    @router.patch("/{item_id}", response_model=ApiResponse[read_schema], summary=f"Patch {label}")
    async def patch_item(
        request: Request, item_id: str, payload: update_schema, session: AsyncSession = Depends(get_session)
    ):
        return await update_item(request, item_id, payload, session)

    @router.delete(
        "/{item_id}",
        response_model=MessageResponse,
        summary=f"Delete {label}",
        description=f"Soft-delete a {label.lower()} by marking it inactive.",
        responses={404: {"description": f"{label} not found"}},
    )
    async def delete_item(request: Request, item_id: str, session: AsyncSession = Depends(get_session)):
        entity = await get_repo(session).soft_delete(item_id)
        if entity is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        on_change()
        await record_admin_action(session, request, "delete", resource, item_id)
        return MessageResponse(message=f"{label} deleted successfully")

    return router
